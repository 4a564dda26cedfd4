"""
Setup script for pdfforge.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdfforge",
    version="1.0.0",
    description="In-memory PDF annotation, watermarking, splitting, merging and compression with structural validation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pdfforge Contributors",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*", "apps", "apps.*"]),
    install_requires=[
        "pypdf>=5.0.0",
        "reportlab>=4.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "fastapi>=0.110.0",
        "python-multipart>=0.0.9",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "httpx>=0.24.0",
        ],
        "server": [
            "uvicorn>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdfforge=pdfforge.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf split merge compress watermark header footer",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
