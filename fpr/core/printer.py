# fpr/core/printer.py
"""
Renders the final file list: dedup, sort, then frame each file's text with a
`=== path ===` header and a separator between files.
"""
from pathlib import Path
from typing import Dict, Iterable, List
import structlog

from fpr.config.settings import PrintConfig, SortMethod
from fpr.exceptions import OutputError
from fpr.util import strip_utf8_bom

log = structlog.get_logger(__name__)

HEADER_TEMPLATE = "=== {path} ==="


def order_paths(paths: Iterable[Path], sort_method: SortMethod) -> List[Path]:
    # deduplicates on the real file (first name seen wins), then sorts.
    by_real_path: Dict[Path, Path] = {}
    for p in paths:
        by_real_path.setdefault(p.resolve(), p)
    unique_paths = list(by_real_path.values())
    if sort_method in (SortMethod.DATE_ASC, SortMethod.DATE_DESC):
        def mod_time_key(p: Path):
            try:
                return (p.stat().st_mtime, p)
            except OSError as e:
                log.warning("failed_to_get_modification_time", path=str(p), error=str(e))
                return (float("inf"), p)
        return sorted(unique_paths, key=mod_time_key, reverse=sort_method == SortMethod.DATE_DESC)
    return sorted(unique_paths, reverse=sort_method == SortMethod.NAME_DESC)


def display_path(file_path: Path, base_dir: Path) -> str:
    # path shown in the header: relative to the base dir when possible.
    if file_path.is_relative_to(base_dir):
        return file_path.relative_to(base_dir).as_posix()
    return str(file_path)


def read_file_text(file_path: Path) -> str:
    try:
        content_bytes = file_path.read_bytes()
    except OSError as e:
        raise OutputError(f"failed to read '{file_path}': {e}") from e
    try:
        return strip_utf8_bom(content_bytes).decode("utf-8")
    except UnicodeDecodeError as e:
        raise OutputError(f"'{file_path}' is not valid UTF-8: {e}") from e


def add_line_numbers(text: str) -> str:
    """Prefixes each line with a right-aligned line number, keeping a trailing newline."""
    lines = text.splitlines()
    if not lines:
        return text
    width = len(str(len(lines)))
    numbered = "\n".join(f"{i:>{width}} | {line}" for i, line in enumerate(lines, start=1))
    return numbered + "\n" if text.endswith(("\n", "\r")) else numbered


def render_files(paths: Iterable[Path], config: PrintConfig) -> str:
    """
    Builds the full output for `paths`.

    Each file becomes `=== <path> ===` followed by its text verbatim; files are
    joined by a blank line, the separator, and another blank line.
    """
    ordered = order_paths(paths, config.sort_method)
    log.info("rendering_files", count=len(ordered), sort=config.sort_method.value)

    parts: List[str] = []
    for idx, file_path in enumerate(ordered):
        content = read_file_text(file_path)
        if config.line_numbers:
            content = add_line_numbers(content)
        parts.append(HEADER_TEMPLATE.format(path=display_path(file_path, config.base_dir)) + "\n")
        parts.append(content)
        if idx + 1 < len(ordered):
            parts.append(f"\n{config.separator}\n\n")
    return "".join(parts)
