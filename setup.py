#!/usr/bin/env python3
"""
pollkv Setup Script
===================
Allows installation of the pollkv package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="pollkv",
    version="1.0.0",
    packages=find_packages(include=["pollkv", "pollkv.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "pollkv=pollkv.server:main",
            "pollkv-cli=pollkv.client:main",
        ],
    },
)
