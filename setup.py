# whiteboard-simulator/setup.py
"""
Setup script for the whiteboard-simulator package.

Packages the kinematic model and motion scheduler of a two-pulley
whiteboard drawing robot, together with the command-line simulator that
animates wheel commands on it.
"""
import os
import re
from setuptools import find_packages, setup


def get_version_from_init():
    """Reads the __version__ string from whiteboard_sim/__init__.py."""
    init_py_path = os.path.join(
        os.path.dirname(__file__), "whiteboard_sim", "__init__.py"
    )
    try:
        with open(init_py_path, "r", encoding="utf-8") as f_version:
            version_file_content = f_version.read()
        version_match = re.search(
            r"^__version__\s*=\s*['\"]([^'\"]*)['\"]",
            version_file_content,
            re.M,
        )
        if version_match:
            return version_match.group(1)
        raise RuntimeError(
            f"Unable to find __version__ string in {init_py_path}."
        )
    except FileNotFoundError as exc:
        raise RuntimeError(
            f"{init_py_path} not found. Ensure you are in the correct "
            f"directory."
        ) from exc


try:
    with open("README.md", "r", encoding="utf-8") as f_readme:
        long_description = f_readme.read()
except FileNotFoundError:
    long_description = (
        "Kinematic simulator for a two-pulley whiteboard drawing robot."
    )


setup(
    name="whiteboard-simulator",
    version=get_version_from_init(),
    description="Kinematic simulator for a two-pulley whiteboard drawing robot.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering",
        "Topic :: Software Development :: Testing :: Simulation",
    ],
    python_requires=">=3.8",
    install_requires=[
        "click>=7.0",  # For the CLI
        "rich>=12.0.0",  # For the console dashboard and output
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "whiteboard-sim=whiteboard_sim.main:main",
        ],
    },
    keywords="polargraph whiteboard plotter kinematics simulator",
)
