#!/usr/bin/env python

"""
Sentry-Core - capture pipeline for Sentry SDKs
==============================================

**Sentry-Core is the capture pipeline shared by Sentry SDKs.** It turns
exceptions, messages and breadcrumbs into events and hands them to a
pluggable backend for delivery.
"""

import os
from setuptools import setup, find_packages

here = os.path.abspath(os.path.dirname(__file__))


def get_file_text(file_name):
    with open(os.path.join(here, file_name)) as in_file:
        return in_file.read()


setup(
    name="sentry-core",
    version="0.1.0",
    author="Sentry Team and Contributors",
    author_email="hello@sentry.io",
    description="Event capture pipeline for Sentry SDKs",
    long_description=get_file_text("README.md"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    # PEP 561
    package_data={"sentry_core": ["py.typed"]},
    zip_safe=False,
    license="MIT",
    python_requires=">=3.7",
    install_requires=[
        "urllib3>=1.26.11",
        "certifi",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
