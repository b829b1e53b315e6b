#!/usr/bin/env python3
"""
Setup script for Hand Sign Recognition
"""

from setuptools import find_packages, setup

setup(
    name="handsign",
    version="0.1.0",
    description="Debounced hand gesture and sign classification from hand landmarks",
    packages=find_packages(include=["handsign", "handsign.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "opencv-python",
        "mediapipe",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "handsign=handsign.main:cli",
        ],
    },
)
