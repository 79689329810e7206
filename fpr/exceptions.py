class FprError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(FprError):
    # errors related to configuration.
    pass

class PatternError(FprError):
    # errors while expanding a grouped path pattern.
    pass

class UnmatchedParenthesisError(PatternError):
    # a '(' with no closing ')' at its nesting depth.
    def __init__(self, pattern: str, position: int):
        self.pattern = pattern
        self.position = position
        super().__init__(f"Unmatched '(' in pattern `{pattern}` (at offset {position})")

class DiscoveryError(FprError):
    # errors while resolving patterns to files.
    pass

class OutputError(FprError):
    # errors during output operations.
    pass
