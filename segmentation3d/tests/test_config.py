#!/usr/bin/env python3
"""
Unit Tests for segmenter configuration decoding and validation.
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from segmentation3d.config import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    SegmenterConfig,
    resolve_confidence_threshold,
)
from segmentation3d.errors import ConfigurationError
from segmentation3d.processing import FilterMode


class TestConfidenceThreshold(unittest.TestCase):
    """Threshold defaulting and range checks."""

    def test_unset_or_non_positive_uses_default(self):
        for value in (None, 0.0, -0.3):
            with self.subTest(value=value):
                self.assertEqual(resolve_confidence_threshold(value), DEFAULT_CONFIDENCE_THRESHOLD)

    def test_valid_values_kept(self):
        self.assertEqual(resolve_confidence_threshold(0.2), 0.2)
        self.assertEqual(resolve_confidence_threshold(1.0), 1.0)

    def test_out_of_range_rejected(self):
        for value in (1.5, float("nan")):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError) as ctx:
                    resolve_confidence_threshold(value)
                self.assertEqual(ctx.exception.context["parameter"], "confidence_threshold_pct")


class TestSegmenterConfig(unittest.TestCase):
    """Test cases for SegmenterConfig."""

    def test_from_dict(self):
        config = SegmenterConfig.from_dict({
            "detector_name": "detector1",
            "confidence_threshold_pct": 0.7,
            "mean_k": 20,
            "sigma": 1.25,
            "camera_name": "front",
        })
        self.assertEqual(config.detector_name, "detector1")
        self.assertEqual(config.confidence_threshold, 0.7)
        self.assertEqual(config.mean_k, 20)
        self.assertEqual(config.sigma, 1.25)
        self.assertEqual(config.camera_name, "front")
        self.assertIs(config.filter_policy.mode, FilterMode.ENABLED)

    def test_defaults(self):
        config = SegmenterConfig.from_dict({"detector_name": "d"})
        self.assertEqual(config.confidence_threshold, DEFAULT_CONFIDENCE_THRESHOLD)
        self.assertFalse(config.filter_policy.is_enabled)
        self.assertEqual(config.camera_name, "")

    def test_unknown_keys_ignored(self):
        with self.assertLogs("segmentation3d.config", level="WARNING"):
            config = SegmenterConfig.from_dict({"detector_name": "d", "colour": "red"})
        self.assertEqual(config.detector_name, "d")

    def test_integral_float_mean_k_accepted(self):
        self.assertEqual(SegmenterConfig.from_dict({"mean_k": 5.0}).mean_k, 5)

    def test_wrong_types_name_the_attribute(self):
        cases = [
            ({"detector_name": 3}, "detector_name"),
            ({"mean_k": 2.5}, "mean_k"),
            ({"mean_k": "ten"}, "mean_k"),
            ({"sigma": True}, "sigma"),
            ({"confidence_threshold_pct": "high"}, "confidence_threshold_pct"),
        ]
        for attributes, parameter in cases:
            with self.subTest(attributes=attributes):
                with self.assertRaises(ConfigurationError) as ctx:
                    SegmenterConfig.from_dict(attributes)
                self.assertEqual(ctx.exception.context["parameter"], parameter)

    def test_only_one_filter_parameter_disables_filtering(self):
        config = SegmenterConfig(detector_name="d", mean_k=10)
        self.assertIs(config.filter_policy.mode, FilterMode.DISABLED)

    def test_validate_lists_dependencies(self):
        self.assertEqual(SegmenterConfig(detector_name="det").validate(), ["det"])
        self.assertEqual(SegmenterConfig(detector_name="det", camera_name="cam").validate(), ["cam", "det"])

    def test_validate_requires_detector(self):
        with self.assertRaises(ConfigurationError) as ctx:
            SegmenterConfig(camera_name="cam").validate()
        self.assertIn("expected a detector", str(ctx.exception))

    def test_validate_rejects_threshold_above_one(self):
        with self.assertRaises(ConfigurationError):
            SegmenterConfig(detector_name="det", confidence_threshold_pct=2.0).validate()


class TestYamlConfig(unittest.TestCase):
    """Loading configuration from YAML files."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "segmenter.yaml"

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_load_top_level(self):
        self.path.write_text("detector_name: yolo\nmean_k: 8\nsigma: 2.0\n")
        config = SegmenterConfig.from_yaml(self.path)
        self.assertEqual(config.detector_name, "yolo")
        self.assertEqual(config.filter_policy.mean_k, 8)

    def test_load_section(self):
        self.path.write_text("segmenter:\n  detector_name: yolo\n  camera_name: wrist\nother: 1\n")
        config = SegmenterConfig.from_yaml(self.path, section="segmenter")
        self.assertEqual(config.camera_name, "wrist")

    def test_missing_section(self):
        self.path.write_text("other: 1\n")
        with self.assertRaises(ConfigurationError):
            SegmenterConfig.from_yaml(self.path, section="segmenter")

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            SegmenterConfig.from_yaml(Path(self.tmpdir.name) / "absent.yaml")

    def test_invalid_yaml(self):
        self.path.write_text("detector_name: [unclosed\n")
        with self.assertRaises(ConfigurationError):
            SegmenterConfig.from_yaml(self.path)

    def test_non_mapping_document(self):
        self.path.write_text("- a\n- b\n")
        with self.assertRaises(ConfigurationError):
            SegmenterConfig.from_yaml(self.path)


if __name__ == "__main__":
    unittest.main(verbosity=2)
