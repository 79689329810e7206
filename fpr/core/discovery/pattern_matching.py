# fpr/core/discovery/pattern_matching.py
from pathlib import Path
from typing import Optional, List, Dict
import pathspec
import structlog

from fpr.exceptions import DiscoveryError

log = structlog.get_logger(__name__)

GitignoreCache = Dict[Path, Optional[pathspec.PathSpec]]

def load_gitignore_patterns_from_file(gitignore_file_path: Path) -> Optional[pathspec.PathSpec]:
    # loads and compiles .gitignore patterns from a given file.
    if not gitignore_file_path.is_file():
        return None
    try:
        with gitignore_file_path.open("r", encoding="utf-8", errors="ignore") as f_obj:
            return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, f_obj)
    except Exception as e:
        log.warning("failed_to_parse_gitignore_file", path=str(gitignore_file_path), error=str(e))
    return None

def compile_glob_patterns_to_spec(glob_patterns: List[str]) -> Optional[pathspec.PathSpec]:
    # compiles glob patterns into a pathspec object using gitignore-style wildcards.
    if not glob_patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, glob_patterns)
    except Exception as e:
        raise DiscoveryError(f"invalid glob `{', '.join(glob_patterns)}`: {e}") from e

def is_path_gitignored(absolute_path_item: Path, gitignore_specs_cache: GitignoreCache) -> bool:
    # checks if an item is ignored by any relevant .gitignore files by traversing upwards.
    current_dir_to_check = absolute_path_item.parent

    while True:
        if current_dir_to_check not in gitignore_specs_cache:
            gitignore_file = current_dir_to_check / ".gitignore"
            gitignore_specs_cache[current_dir_to_check] = load_gitignore_patterns_from_file(gitignore_file)

        spec = gitignore_specs_cache[current_dir_to_check]
        if spec:
            path_str_for_match = absolute_path_item.relative_to(current_dir_to_check).as_posix()
            if spec.match_file(path_str_for_match):
                return True

        if current_dir_to_check.parent == current_dir_to_check:
            break
        current_dir_to_check = current_dir_to_check.parent

    return False
