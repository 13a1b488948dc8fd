#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Setup Script (Legacy Compatibility)
===================================

All configuration is in pyproject.toml (PEP 621).

For modern installations, use:
    pip install .
    pip install -e .[dev]
"""

from setuptools import setup

setup()
