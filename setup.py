"""
Setup script for thinfilm_lbm package.
"""

from setuptools import setup, find_packages

setup(
    name="thinfilm_lbm",
    version="0.1.0",
    description="Lattice Boltzmann solver for the thin-film equation on CPU and GPU",
    author="Andrey",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "scipy>=1.7",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
