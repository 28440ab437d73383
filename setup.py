#!/usr/bin/env python
"""Setup script for the revive-core library."""
from pathlib import Path
from setuptools import setup, find_packages

here = Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

version = "0.1.0"

setup(
    name="revive-core",
    version=version,
    description="Identity-preserving state snapshots for live reload",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="hot-reload state snapshot reactive serialization",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    python_requires=">=3.8",

    install_requires=[
        "orjson>=3.8.0",
        "xxhash>=3.0.0",
        "tqdm>=4.65.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.0.0",
            "hypothesis>=6.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "hypothesis>=6.0.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },

    entry_points={
        "console_scripts": [
            "revive-core=revive_core.cli:main",
        ],
    },

    package_data={
        "revive_core": ["py.typed"],
    },
    include_package_data=True,
    zip_safe=True,
)
