#!/usr/bin/env python3
"""
Setup configuration for T1D Stock (GS1 sensor decoder and inventory)
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="t1d-stock",
    version="1.0.0",
    author="T1D Stock Team",
    author_email="",
    description="GS1 barcode decoder and inventory tracker for diabetes sensors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "structlog>=23.1.0",
        "pymongo>=4.0",
        "python-dateutil>=2.8.2",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "mongomock>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gs1-decode=gs1_decoder.__main__:main",
            "sensor-stock=inventory.cli:main",
        ],
    },
    classifiers=[
        "Intended Audience :: Healthcare Industry",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords="gs1 barcode decoder gtin dexcom sensor inventory",
)
