#!/usr/bin/env python
import os
import re

from setuptools import find_packages, setup


def get_version():
    path = os.path.join("src", "preview_composite", "version.py")
    with open(path) as f:
        match = re.search(r"^__version__ = [\"']([^\"']+)[\"']", f.read(), re.M)
    if match is None:
        raise RuntimeError("Unable to find __version__ in %s" % path)
    return match.group(1)


setup(
    name="preview-composite",
    version=get_version(),
    description="Flatten canvas screenshots with live preview snapshots",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "attrs>=23.1.0",
        "httpx>=0.24",
        "numpy",
        "Pillow>=9.1.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["preview-composite=preview_composite.__main__:main"],
    },
)
