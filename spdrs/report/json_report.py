# spdrs/report/json_report.py

"""
JSON report for spdrs: serialises a CrawlReport to a file.
"""
from pathlib import Path

from spdrs.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path* and return the path.

    :param report: collected crawl results
    :param output_path: path of the JSON file, parent directories are created
    :param pretty: indent the output by two spaces
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output
