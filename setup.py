"""
Setup script for malg

Pure Python package; the pool is allocated through ctypes, so there is no
native library to build. This script handles:
1. Reading the version from src/malg/__init__.py
2. Reading the long description from README.md when present
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/malg/__init__.py
def get_version():
    version_file = Path("src/malg/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="malg",
    version=get_version(),
    description="Dense 2-D matrices over one contiguous pool with in-place transpose",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["numpy"],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Operating System :: OS Independent",
    ],
    zip_safe=False,
)
