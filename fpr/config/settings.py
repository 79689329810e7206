from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_SEPARATOR = "---"
DEFAULT_RECURSIVE = True
DEFAULT_CONSOLE_SHOW_SUMMARY = False

class SortMethod(Enum):
    # defines available orderings for the printed files.
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["SortMethod"]:
        if not s:
            return None
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_sort_method_string", input_string=s)
            return None

DEFAULT_SORT_METHOD = SortMethod.NAME_ASC

@dataclass
class PrintConfig:
    # holds all configuration parameters for a single run.
    inputs: List[str] = field(default_factory=list)
    separator: str = DEFAULT_SEPARATOR
    recursive: bool = DEFAULT_RECURSIVE
    respect_gitignore: bool = False
    follow_symlinks: bool = False
    line_numbers: bool = False
    sort_method: SortMethod = DEFAULT_SORT_METHOD
    output_file: Optional[Path] = None
    read_from_stdin: bool = False
    nul_separated: bool = False
    console_show_summary: bool = DEFAULT_CONSOLE_SHOW_SUMMARY
    save_profile_name: Optional[str] = None

    # internal state, not set directly by user flags.
    base_dir: Path = field(init=False)

    def __post_init__(self):
        # performs initial setup after dataclass instantiation.
        self.base_dir = Path.cwd().resolve()
