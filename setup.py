# setup.py
from setuptools import setup, find_packages

setup(
    name="tickle",
    version="0.1.0",
    description="An embeddable Tcl-like command language interpreter",
    packages=find_packages(include=["tickle", "tickle.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["tickle=tickle.main:main"],
    },
    zip_safe=False,
)
