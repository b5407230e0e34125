"""Setup module for zigwire"""

import pathlib

from setuptools import find_packages, setup

import zigwire

REQUIRES = [
    "typing_extensions",
    "voluptuous",
]

setup(
    name="zigwire",
    version=zigwire.__version__,
    description="Zigbee cluster library codecs and health tracking for vendor devices",
    long_description=(pathlib.Path(__file__).parent / "README.md").read_text(),
    long_description_content_type="text/markdown",
    license="GPL-3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=REQUIRES,
    extras_require={
        "testing": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.11",
)
