#!/usr/bin/env python3
"""
Setup script for Hand Gesture Control
"""

from pathlib import Path

from setuptools import setup


def read_requirements():
    """Read runtime requirements, skipping blanks and comments"""
    path = Path(__file__).parent / "requirements.txt"
    return [
        line.strip()
        for line in path.read_text().splitlines()
        if line.strip() and not line.startswith("#")
    ]


setup(
    name="gesture-control",
    version="0.1.0",
    description="Webcam hand gesture recognition with discrete commands and two-hand pointing, zoom and click",
    packages=["gesture_control"],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "gesture-control=gesture_control.main:cli",
        ],
    },
)
