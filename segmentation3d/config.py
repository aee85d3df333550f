#!/usr/bin/env python3
"""
Segmenter configuration.

Attributes accepted (YAML or a plain attribute map):
- detector_name (str, required): detector collaborator to wrap
- confidence_threshold_pct (float, optional): minimum detection score in
  (0, 1]; unset or <= 0 means the default of 0.5
- mean_k (int, optional), sigma (float, optional): statistical filter
  parameters; filtering runs only when both are positive
- camera_name (str, optional): default camera collaborator

Author: Perception Team
"""

import logging
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ConfigurationError
from .processing.outlier_filter import FilterPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.5


def resolve_confidence_threshold(value: Optional[float]) -> float:
    """
    Apply the threshold policy: unset or <= 0 falls back to the default.

    Raises:
        ConfigurationError: if the value is above 1 or not a number
    """
    if value is None or value <= 0.0:
        if value is not None and value < 0.0:
            logger.warning(f"confidence_threshold_pct={value} treated as unset, "
                           f"using {DEFAULT_CONFIDENCE_THRESHOLD}")
        return DEFAULT_CONFIDENCE_THRESHOLD
    if math.isnan(value) or value > 1.0:
        raise ConfigurationError(
            f"confidence_threshold_pct must be in (0, 1], got {value}",
            {"parameter": "confidence_threshold_pct"},
        )
    return float(value)


@dataclass
class SegmenterConfig:
    """Attributes for turning a 2D detector into a 3D segmenter."""
    detector_name: str = ""
    confidence_threshold_pct: float = 0.0
    mean_k: int = 0
    sigma: float = 0.0
    camera_name: str = ""

    @classmethod
    def from_dict(cls, attributes: Optional[Dict[str, Any]]) -> "SegmenterConfig":
        """
        Decode an attribute map.

        Unknown keys are ignored with a warning; values of the wrong type
        raise ConfigurationError naming the attribute.
        """
        attributes = dict(attributes or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(attributes) - known)
        if unknown:
            logger.warning(f"Ignoring unknown segmenter attributes: {unknown}")

        kwargs = {}
        for name in ("detector_name", "camera_name"):
            if attributes.get(name) is not None:
                kwargs[name] = _as_str(name, attributes[name])
        for name in ("confidence_threshold_pct", "sigma"):
            if attributes.get(name) is not None:
                kwargs[name] = _as_float(name, attributes[name])
        if attributes.get("mean_k") is not None:
            kwargs["mean_k"] = _as_int("mean_k", attributes["mean_k"])
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path], section: Optional[str] = None) -> "SegmenterConfig":
        """Load attributes from a YAML file, optionally from a top-level section."""
        path = Path(path)
        try:
            with path.open("r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(f"configuration file not found: {path}", {"path": str(path)}) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {path}: {e}", {"path": str(path)}) from e

        if section is not None:
            data = data.get(section) if isinstance(data, dict) else None
            if data is None:
                raise ConfigurationError(f"section '{section}' not found in {path}", {"path": str(path)})
        if not isinstance(data, dict):
            raise ConfigurationError(f"expected a mapping of attributes in {path}", {"path": str(path)})

        logger.info(f"Segmenter configuration loaded from: {path}")
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """
        Check the attributes and list the collaborators they depend on.

        Returns:
            Dependency names: the default camera (if set) then the detector
        """
        deps = []
        if self.camera_name:
            deps.append(self.camera_name)
        if not self.detector_name:
            raise ConfigurationError("expected a detector to be specified", {"parameter": "detector_name"})
        deps.append(self.detector_name)
        resolve_confidence_threshold(self.confidence_threshold_pct)
        return deps

    @property
    def confidence_threshold(self) -> float:
        return resolve_confidence_threshold(self.confidence_threshold_pct)

    @property
    def filter_policy(self) -> FilterPolicy:
        return FilterPolicy.from_params(self.mean_k, self.sigma)


def _as_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a string, got {type(value).__name__}", {"parameter": name})
    return value


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {type(value).__name__}", {"parameter": name})
    return float(value)


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be an integer, got {type(value).__name__}", {"parameter": name})
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value}", {"parameter": name})
    return int(value)
