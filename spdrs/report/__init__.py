# File: spdrs/report/__init__.py
"""spdrs.report: writers for crawl reports."""

from __future__ import annotations

from spdrs.report.json_report import render_json

__all__ = ["render_json"]
