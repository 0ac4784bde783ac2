"""JsonReportStore — writes experiment reports as JSON files."""

import re
from pathlib import Path

from cobalt.experiment.domain.report import ExperimentReport

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def _slug(text: str) -> str:
    return _UNSAFE.sub("-", text).strip("-") or "experiment"


class JsonReportStore:
    """Writes ``<output_dir>/results/<timestamp>_<name>_<id>.json``.

    Satisfies the ReportStore protocol structurally. Filesystem errors
    propagate to the caller.
    """

    def __init__(self, output_dir: Path) -> None:
        self._results_dir = output_dir / "results"

    def save(self, report: ExperimentReport) -> str:
        self._results_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{_slug(report.timestamp)}_{_slug(report.name)}_{report.id}.json"
        path = self._results_dir / filename
        path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
        return str(path)
