"""
Path resolution module for fpr.

Turns each expanded pattern string into concrete file paths: a literal file,
every file under a directory, or every file under the base directory that a
glob matches.
"""
from .path_resolution import resolve_pattern, read_patterns_from_stdin

__all__ = ["resolve_pattern", "read_patterns_from_stdin"]
