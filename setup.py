#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
A minimal setup.py file that defers to pyproject.toml for configuration.
This file exists for legacy tooling that still invokes ``setup.py`` directly
when installing macro-transforms.
"""

import setuptools

if __name__ == "__main__":
    # Project metadata and dependencies live in pyproject.toml
    setuptools.setup()
