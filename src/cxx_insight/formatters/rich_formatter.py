"""Rich terminal formatter for CXX Insight."""

from io import StringIO
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..reporting import AnalysisReport, Metric
from .base import BaseFormatter

console = Console(stderr=True)

_FILE_COLUMNS = (
    ("Functions", Metric.FUNCTIONS),
    ("Complexity", Metric.COMPLEXITY),
    ("Cognitive", Metric.COGNITIVE_COMPLEXITY),
    ("Complex", Metric.COMPLEX_FUNCTIONS),
    ("Big", Metric.BIG_FUNCTIONS),
    ("LOC in fn", Metric.LOC_IN_FUNCTIONS),
    ("Public API", Metric.PUBLIC_API),
    ("Undocumented", Metric.PUBLIC_UNDOCUMENTED_API),
)


def _number(value) -> str:
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def _percent_label(value: float) -> str:
    if value >= 50.0:
        return f"[red bold]{value:.1f}%[/red bold]"
    elif value >= 20.0:
        return f"[yellow]{value:.1f}%[/yellow]"
    else:
        return f"[green]{value:.1f}%[/green]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: module summary panel, per-file table, issues."""

    def __init__(self, output: Optional[Console] = None) -> None:
        self.console = output or console

    def render(self, report: AnalysisReport) -> None:
        self._print_summary(report, self.console)
        self._print_files(report, self.console)
        self._print_issues(report, self.console)

    def format(self, report: AnalysisReport) -> str:
        recorder = Console(file=StringIO(), record=True, width=120)
        self._print_summary(report, recorder)
        self._print_files(report, recorder)
        self._print_issues(report, recorder)
        return recorder.export_text()

    def _print_summary(self, report: AnalysisReport, out: Console) -> None:
        value = report.module_value
        lines = [
            f"Files analysed: [bold]{len(report.files)}[/bold]"
            + (f"   [red]failed: {len(report.failed_files)}[/red]" if report.failed_files else ""),
            f"Functions: [bold]{value(Metric.FUNCTIONS)}[/bold]   "
            f"complexity: {value(Metric.COMPLEXITY)}   "
            f"cognitive: {value(Metric.COGNITIVE_COMPLEXITY)}",
            f"Complex functions: [bold]{value(Metric.COMPLEX_FUNCTIONS)}[/bold] "
            f"({_percent_label(value(Metric.COMPLEX_FUNCTIONS_PERC))}), "
            f"LOC {value(Metric.COMPLEX_FUNCTIONS_LOC)} "
            f"({_percent_label(value(Metric.COMPLEX_FUNCTIONS_LOC_PERC))})",
            f"Big functions: [bold]{value(Metric.BIG_FUNCTIONS)}[/bold] "
            f"({_percent_label(value(Metric.BIG_FUNCTIONS_PERC))}), "
            f"LOC {value(Metric.BIG_FUNCTIONS_LOC)} of {value(Metric.LOC_IN_FUNCTIONS)} "
            f"({_percent_label(value(Metric.BIG_FUNCTIONS_LOC_PERC))})",
            f"Public API: [bold]{value(Metric.PUBLIC_API)}[/bold], "
            f"undocumented {value(Metric.PUBLIC_UNDOCUMENTED_API)} "
            f"(documented {_number(value(Metric.PUBLIC_DOCUMENTED_API_DENSITY))}%)",
            f"Issues: [bold]{value(Metric.ISSUES)}[/bold]",
        ]
        out.print(Panel("\n".join(lines), title="[bold cyan]CXX Insight[/bold cyan]", expand=False))

    def _print_files(self, report: AnalysisReport, out: Console) -> None:
        if not report.files:
            out.print("[yellow]No files analysed.[/yellow]")
            return

        table = Table(title="Files", show_lines=False)
        table.add_column("File", style="cyan", no_wrap=True)
        for header, _ in _FILE_COLUMNS:
            table.add_column(header, justify="right")

        for file in sorted(report.files):
            table.add_row(
                escape(file), *(_number(report.file_value(file, metric)) for _, metric in _FILE_COLUMNS)
            )
        out.print(table)

    def _print_issues(self, report: AnalysisReport, out: Console) -> None:
        if not report.issues:
            out.print("[green]No issues.[/green]")
            return

        table = Table(title="Issues")
        table.add_column("File", style="cyan")
        table.add_column("Line", justify="right")
        table.add_column("Rule", style="magenta")
        table.add_column("Message")

        for file in sorted(report.issues):
            for issue in report.issues[file]:
                message = escape(issue.primary.message)
                for secondary in issue.secondary:
                    message += f"\n  [dim]line {secondary.line}: {escape(secondary.message)}[/dim]"
                table.add_row(escape(file), issue.primary.line, issue.rule_id, message)
        out.print(table)
