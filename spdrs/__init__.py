# spdrs/__init__.py
"""
spdrs package initializer.
Defines the package version; the CLI lives in :mod:`spdrs.cli`.
"""
__version__ = "0.1.0"
