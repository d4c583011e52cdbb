"""Setuptools build hooks for einloop."""

from __future__ import annotations

from setuptools import setup

# The project ships pure Python modules only, so we intentionally avoid
# overriding ``bdist_wheel``.
setup()
