#!/usr/bin/env python3
"""
Setup script for the Detection-to-Segments Package
"""

from setuptools import setup, find_packages

setup(
    name="segmentation3d",
    version="1.0.0",
    description="Turn 2D object detections and RGB-D frames into labeled 3D point cloud objects",
    author="Perception Team",
    packages=find_packages(include=["segmentation3d", "segmentation3d.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.5.0",
        "opencv-python-headless>=4.5.0",
        "PyYAML>=5.4",
    ],
    extras_require={
        "open3d": ["open3d>=0.15.0"],
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
