#!/usr/bin/env python
from pathlib import Path

from setuptools import setup


def get_version():
    ini_path = Path(__file__).parent / "influxline" / "__init__.py"
    for line in ini_path.open():
        if line.startswith("__version__"):
            return line.split("=")[1].strip("' \"\n")
    raise ValueError(f"__version__ line not found in {ini_path}")


long_description = """
Influxline provides typed measurements for InfluxDB and converts them
to and from the two wire formats of the database: line protocol for
writes and annotated CSV for query results.
"""

description = "Typed measurements, line protocol and CSV results for InfluxDB"

setup(
    name="influxline",
    version=get_version(),
    description=description,
    long_description=long_description,
    license="MIT",
    packages=["influxline"],
    python_requires=">=3.7",
    install_requires=[
        "numpy",
        "pytz",
        "requests",
        "tabulate",
    ],
    extras_require={
        "tests": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "influxline = influxline.cli:run",
        ],
    },
)
