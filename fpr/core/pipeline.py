# fpr/core/pipeline.py
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.console import Console as RichConsole
import structlog
import logging as stdlib_logging

from fpr.config.settings import PrintConfig
from fpr.core.discovery import resolve_pattern, read_patterns_from_stdin
from fpr.core.discovery.pattern_matching import GitignoreCache
from fpr.core.patterns import expand_group_pattern
from fpr.core.printer import render_files, order_paths
from fpr.exceptions import FprError

log = structlog.get_logger(__name__)


class FilePrinter:
    # orchestrates expansion -> resolution -> rendering for all inputs of one run.
    def __init__(self, config: PrintConfig):
        self.config: PrintConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.expanded_patterns: Dict[str, List[str]] = {}
        self.files: List[Path] = []
        self._gitignore_cache: GitignoreCache = {}

    def collect_inputs(self) -> List[str]:
        # command-line inputs first, then anything read from stdin.
        raw_inputs = list(self.config.inputs)
        if self.config.read_from_stdin:
            raw_inputs.extend(read_patterns_from_stdin(self.config.nul_separated))
        if not raw_inputs:
            raise FprError("No inputs given.")
        return raw_inputs

    def expand_inputs(self, raw_inputs: List[str]) -> List[str]:
        # expands grouping syntax in every input; any malformed input aborts the run.
        patterns: List[str] = []
        for raw in raw_inputs:
            expanded = expand_group_pattern(raw)
            self.expanded_patterns[raw] = expanded
            self.log.debug("input_expanded", raw=raw, patterns=expanded)
            patterns.extend(expanded)
        return patterns

    def resolve_files(self, patterns: List[str], progress: Optional[Progress] = None) -> List[Path]:
        task_id = progress.add_task("resolving patterns...", total=len(patterns)) if progress is not None else None
        found: List[Path] = []
        for pattern in patterns:
            found.extend(resolve_pattern(pattern, self.config, self._gitignore_cache))
            if progress is not None and task_id is not None:
                progress.update(task_id, advance=1, description=f"resolved {pattern}")
        self.files = order_paths(found, self.config.sort_method)
        self.log.info("files_resolved", patterns=len(patterns), files=len(self.files))
        return self.files

    def generate(self) -> str:
        # runs the full pipeline and returns the rendered output.
        app_log_level = stdlib_logging.getLogger("fpr").getEffectiveLevel()
        progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
        stderr_console = RichConsole(file=sys.stderr)

        with Progress(
            SpinnerColumn(), TextColumn("[bold blue]{task.description}"), BarColumn(),
            transient=True, disable=progress_disabled, console=stderr_console
        ) as progress:
            patterns = self.expand_inputs(self.collect_inputs())
            self.resolve_files(patterns, progress)

            render_task = progress.add_task("rendering files...", total=1)
            output = render_files(self.files, self.config)
            progress.update(render_task, completed=1, description=f"rendered {len(self.files)} files.")

        return output
