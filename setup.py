# setup.py
from __future__ import annotations

from setuptools import find_namespace_packages, setup

setup(
    name="lifeformats",
    version="0.1.0",
    description="Lazy decoders for cellular automaton pattern files",
    packages=find_namespace_packages(include=["lifeformats", "lifeformats.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "Pillow",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest", "pytest-benchmark"],
    },
    entry_points={
        "console_scripts": ["lifeformats=lifeformats.__main__:main"],
    },
)
