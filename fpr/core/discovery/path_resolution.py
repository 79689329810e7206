# fpr/core/discovery/path_resolution.py
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional
import structlog

from fpr.config.settings import PrintConfig
from fpr.core.discovery.pattern_matching import GitignoreCache
from fpr.core.discovery.walker import walk_directory, walk_glob
from fpr.exceptions import DiscoveryError
from fpr.util import looks_like_glob

log = structlog.get_logger(__name__)

def _absolute(path: Path) -> Path:
    # absolute and normalized, but symlinks are kept as named.
    return Path(os.path.abspath(path))

def resolve_pattern(
    pattern: str,
    config: PrintConfig,
    gitignore_cache: Optional[GitignoreCache] = None,
) -> List[Path]:
    """
    Resolves one expanded pattern string to absolute file paths.

    Globs are matched against the files under `config.base_dir`; a directory
    yields the files beneath it; a file yields itself. Explicitly named files
    are never filtered by .gitignore. Symlinks in the returned paths are not
    resolved, so headers show the path the user named.

    Raises:
        DiscoveryError: if a non-glob pattern names nothing on disk.
    """
    if not pattern.strip():
        raise DiscoveryError(f"Input `{pattern}` does not exist")
    if gitignore_cache is None:
        gitignore_cache = {}

    if looks_like_glob(pattern):
        found = [_absolute(p) for p in walk_glob(pattern, config, gitignore_cache)]
        if not found:
            log.info("glob_matched_no_files", pattern=pattern)
        return found

    raw_path = Path(pattern)
    path = raw_path if raw_path.is_absolute() else config.base_dir / raw_path
    if path.is_dir():
        log.debug("resolving_directory_input", path=str(path), recursive=config.recursive)
        return [
            _absolute(p)
            for p in walk_directory(path, config, recursive=config.recursive, gitignore_cache=gitignore_cache)
        ]
    if path.is_file():
        return [_absolute(path)]
    raise DiscoveryError(f"Input `{pattern}` does not exist")

def read_patterns_from_stdin(nul_separated: bool = False, stream: Optional[BinaryIO] = None) -> List[str]:
    # reads input patterns from stdin, one per line or NUL-separated.
    if stream is None:
        stream = sys.stdin.buffer
    try:
        stdin_bytes = stream.read()
    except Exception as e:
        raise DiscoveryError(f"fatal error reading patterns from stdin: {e}") from e

    path_separator = b"\0" if nul_separated else b"\n"
    patterns: List[str] = []
    for raw in stdin_bytes.split(path_separator):
        pattern = raw.decode("utf-8", errors="replace").strip()
        if pattern:
            patterns.append(pattern)
    log.info("patterns_read_from_stdin", count=len(patterns), nul_separated=nul_separated)
    return patterns
