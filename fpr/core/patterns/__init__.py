"""
Grouped path pattern expansion for fpr.

Turns a single argument such as `src/(main.rs, lib.rs, util/(fs, time), -tests)`
into the concrete path (or glob) strings it stands for, with exclusions applied.
"""
from .expander import ExpansionPair, expand_group_pattern, expand_pairs
from fpr.util import looks_like_glob

__all__ = ["ExpansionPair", "expand_group_pattern", "expand_pairs", "looks_like_glob"]
