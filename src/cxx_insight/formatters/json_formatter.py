"""JSON formatter for CXX Insight."""

import json
from typing import Any

from ..reporting import AnalysisReport
from .base import BaseFormatter


def _measurements(measurements) -> dict[str, Any]:
    return {m.metric.value: m.value for m in measurements}


class JsonFormatter(BaseFormatter):
    """Render the report as one JSON document."""

    def render(self, report: AnalysisReport) -> None:
        print(self.format(report))

    def format(self, report: AnalysisReport) -> str:
        data = {
            "module": _measurements(report.module),
            "files": {file: _measurements(ms) for file, ms in report.files.items()},
            "issues": {
                file: [issue.to_json() for issue in issues] for file, issues in report.issues.items()
            },
            "failed_files": list(report.failed_files),
        }
        return json.dumps(data, indent=2)
