"""fpr: print files, globs and grouped path patterns with separators."""

__version__ = "0.1.0"
