#!/usr/bin/env python3
"""
Barbatos Setup Configuration
Uniform cache contract with Redis and programmable mock backends
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_requirements(path):
    with open(path, "r", encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.startswith("#")]


requirements = read_requirements("config/requirements.txt")
test_requirements = read_requirements("config/requirements-test.txt")

setup(
    name="barbatos",
    version="1.0.0",
    author="zeroxsolutions",
    description="Uniform cache contract with Redis and programmable mock backends",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["barbatos", "barbatos.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
    },
    include_package_data=True,
    keywords="cache redis mock testing",
)

#setup.py ends here.
