#!/usr/bin/env python3
"""
Setup script for balena settings.

This file exists for backward compatibility with older pip versions
and editable installs. The actual configuration is in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
