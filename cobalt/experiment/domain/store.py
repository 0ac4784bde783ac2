"""ReportStore port — persists finished experiment reports."""

from typing import Protocol

from cobalt.experiment.domain.report import ExperimentReport


class ReportStore(Protocol):
    def save(self, report: ExperimentReport) -> str:
        """Persist the report and return where it was written."""
        ...
