# fpr/core/discovery/walker.py
import os
from pathlib import Path
from typing import Iterator, Optional
import pathspec
import structlog

from fpr.config.settings import PrintConfig
from fpr.core.discovery.pattern_matching import (
    GitignoreCache,
    compile_glob_patterns_to_spec,
    is_path_gitignored,
)

log = structlog.get_logger(__name__)

def walk_directory(
    directory: Path,
    config: PrintConfig,
    recursive: bool = True,
    gitignore_cache: Optional[GitignoreCache] = None,
) -> Iterator[Path]:
    # yields every file under `directory`, or only its immediate files when not recursive.
    if gitignore_cache is None:
        gitignore_cache = {}

    def _ignored(file_path: Path) -> bool:
        return config.respect_gitignore and is_path_gitignored(file_path, gitignore_cache)

    if not recursive:
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and not _ignored(entry):
                yield entry
        return

    for root, dirs, files in os.walk(str(directory), topdown=True, followlinks=config.follow_symlinks):
        dirs.sort()
        for file_name in sorted(files):
            file_path = Path(root, file_name)
            if file_path.is_file() and not _ignored(file_path):
                yield file_path

def _parent_dir_matches(spec: pathspec.PathSpec, rel_path: Path) -> bool:
    # true if the glob names one of the file's directories rather than the file.
    return any(spec.match_file(parent.as_posix()) for parent in rel_path.parents if parent != Path("."))

def walk_glob(
    glob_pattern: str,
    config: PrintConfig,
    gitignore_cache: Optional[GitignoreCache] = None,
) -> Iterator[Path]:
    # yields files under the base directory whose relative path matches the glob.
    # globs always search the whole tree, whatever `config.recursive` says.
    spec = compile_glob_patterns_to_spec([glob_pattern])
    assert spec is not None
    # pathspec also matches everything below a matching directory; only a
    # trailing `**` is meant to reach into subtrees.
    matches_subtrees = glob_pattern.rstrip("/").endswith("**")
    log.debug("glob_walk_started", pattern=glob_pattern, base_dir=str(config.base_dir))

    matched = 0
    for file_path in walk_directory(config.base_dir, config, recursive=True, gitignore_cache=gitignore_cache):
        rel_path = file_path.relative_to(config.base_dir)
        if not spec.match_file(rel_path.as_posix()):
            continue
        if not matches_subtrees and _parent_dir_matches(spec, rel_path):
            continue
        matched += 1
        yield file_path

    log.debug("glob_walk_finished", pattern=glob_pattern, matched=matched)
