"""
Setup script for lbm3d package.
"""

from setuptools import setup, find_packages

setup(
    name="lbm3d",
    version="0.1.0",
    description="D3Q19 Lattice Boltzmann fluid simulation core for 3D boxes",
    author="Andrey",
    packages=find_packages(include=["lbm3d", "lbm3d.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
