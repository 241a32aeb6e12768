#!/usr/bin/env python3
"""
Setup script for FSO-SIM package.
"""

from setuptools import setup, find_packages

# Read the README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements
requirements = [
    "numpy>=1.21.0",
    "scipy>=1.7.0",
    "click>=8.0.0",
    "pyyaml>=6.0",
    "matplotlib>=3.5.0",
    "tqdm>=4.64.0",
]

# Development requirements
dev_requirements = [
    "pytest>=7.0.0",
    "pytest-cov>=3.0.0",
    "black>=22.0.0",
    "isort>=5.10.0",
    "flake8>=4.0.0",
    "mypy>=0.950",
]

setup(
    name="fso-sim",
    version="0.1.0",
    author="FSO-SIM Development Team",
    author_email="contact@fso-sim.org",
    description="Discrete-event simulation of free-space optical satellite down links",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": ["pytest>=7.0.0", "pytest-cov>=3.0.0"],
    },
    entry_points={
        "console_scripts": [
            "fso-sim=fso_sim.cli.main:cli",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
