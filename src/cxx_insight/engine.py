"""Analysis engine: drives files through the calculators and aggregators.

Per file:
    enter_file -> per-function pass (metrics, classification, cognitive
    check) -> public API count (headers only) -> finish

A file whose analysis raises is abandoned: its partial counters and
pending issues are discarded and it is recorded in ``failed_files``.

Usage:
    engine = AnalysisEngine(load_config())
    context = engine.analyze_files(expand_paths(paths, engine.config.analyzed_suffixes))
    report = ReportingFacade(context).build_report()
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from .aggregation import FileMetricSnapshot
from .config import DEFAULT_CONFIG, AnalysisConfig
from .context import AnalysisRunContext
from .exceptions import AggregationError, CxxInsightError
from .issues import Issue
from .logging_config import get_logger
from .metrics import analyze_functions
from .reporting import AnalysisReport, ReportingFacade
from .scanning import ParsedFile, TreeSitterNormalizer, expand_paths

logger = get_logger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


class AnalysisEngine:
    """Runs the per-file analysis pass into an AnalysisRunContext."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        normalizer_factory: Callable[[], TreeSitterNormalizer] = TreeSitterNormalizer,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._normalizer_factory = normalizer_factory
        self._local = threading.local()

    def new_context(self) -> AnalysisRunContext:
        return AnalysisRunContext.create(self.config)

    # ── Single file ───────────────────────────────────────────────────

    def analyze_tree(self, parsed: ParsedFile, context: AnalysisRunContext) -> FileMetricSnapshot:
        """Analyse one parsed file into ``context``.

        Raises:
            MalformedSubtreeError: If a function cannot be scored (the file
                is abandoned first)
            AggregationError: If the file was already analysed
        """
        file = parsed.path
        logger.debug(f"Entering {file}")
        context.aggregator.enter_file(file)

        issues: list[Issue] = []
        try:
            context.api_counter.enter_file(file)
            for unit in analyze_functions(parsed.root):
                context.aggregator.record_function(unit)
                issue = context.cognitive_check.check(unit)
                if issue is not None:
                    issues.append(issue)
            if context.config.is_header(file):
                context.api_counter.count_tree(parsed.root)
        except Exception:
            self._abandon(context, file)
            raise

        snapshot = context.aggregator.finish(file)
        context.api_counter.finish(file)
        context.issues.add_all(file, issues)
        logger.debug(
            f"Finished {file}: {snapshot.totals.functions} function(s), {len(issues)} issue(s)"
        )
        return snapshot

    def analyze_file(
        self, path: Path, context: AnalysisRunContext, identity: Optional[str] = None
    ) -> FileMetricSnapshot:
        """Parse and analyse one file.

        Raises:
            FileAccessError: If the file cannot be read
            ParsingError: If the file cannot be parsed
        """
        parsed = self._normalizer().parse_file(path, identity)
        return self.analyze_tree(parsed, context)

    # ── Many files ────────────────────────────────────────────────────

    def analyze_files(
        self,
        files: Sequence[Path],
        workers: Optional[int] = None,
        context: Optional[AnalysisRunContext] = None,
    ) -> AnalysisRunContext:
        """Analyse files, in parallel when more than one worker is allowed.

        Every file is analysed into its own context; finished contexts are
        merged into the run context under a lock. Failing files are logged
        and listed in ``failed_files``.
        """
        context = context or self.new_context()
        workers = workers or self.config.workers or _DEFAULT_WORKERS
        lock = threading.Lock()

        def _analyze_one(path: Path) -> None:
            local = context.spawn()
            try:
                self.analyze_file(path, local)
            except CxxInsightError as e:
                logger.warning(f"Skipping {path}: {e}")
                local.failed_files.append(str(path))
            except Exception as e:
                logger.warning(f"Unexpected error analysing {path}: {e}")
                logger.debug("Traceback:", exc_info=True)
                local.failed_files.append(str(path))
            with lock:
                try:
                    context.merge(local)
                except AggregationError as e:
                    logger.warning(f"Skipping {path}: {e}")
                    context.failed_files.append(str(path))

        if workers == 1 or len(files) < 2:
            for path in files:
                _analyze_one(path)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {executor.submit(_analyze_one, path): path for path in files}
                for future in as_completed(futures):
                    future.result()

        if context.failed_files:
            logger.warning(f"{len(context.failed_files)} file(s) could not be analysed")
        return context

    # ── Internals ─────────────────────────────────────────────────────

    def _normalizer(self) -> TreeSitterNormalizer:
        """One normalizer (and tree-sitter parser) per thread."""
        normalizer = getattr(self._local, "normalizer", None)
        if normalizer is None:
            normalizer = self._normalizer_factory()
            self._local.normalizer = normalizer
        return normalizer

    @staticmethod
    def _abandon(context: AnalysisRunContext, file: str) -> None:
        logger.debug(f"Abandoning {file}")
        if context.aggregator.current_file == file:
            context.aggregator.abandon(file)
        if context.api_counter.current_file == file:
            context.api_counter.abandon(file)


def analyze(
    paths: Iterable[Path],
    config: Optional[AnalysisConfig] = None,
    workers: Optional[int] = None,
) -> AnalysisReport:
    """Analyse files and directories and return the published report.

    Example:
        >>> report = analyze([Path("src")])
        >>> report.module_value(Metric.COMPLEX_FUNCTIONS)
    """
    engine = AnalysisEngine(config)
    files = expand_paths(paths, engine.config.analyzed_suffixes)
    logger.info(f"Analysing {len(files)} file(s)")
    context = engine.analyze_files(files, workers=workers)
    return ReportingFacade(context).build_report()
