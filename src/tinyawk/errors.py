## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class AwkError(Exception):
    def __init__(self, message: str = "", *, fragment=None):
        """Base class for all tinyawk-raised errors."""
        super().__init__(message)
        self.fragment: str = fragment

class AwkParseError(AwkError):
    """Parse-time problems; raised before any record is processed."""
    pass

class AwkSyntaxError(AwkParseError):
    pass

class AwkMissingBraces(AwkSyntaxError):
    pass

class AwkInvalidRegex(AwkParseError):
    pass

class AwkInvalidLineNumber(AwkParseError, ValueError):
    pass

class AwkInvalidField(AwkParseError, ValueError):
    pass

class AwkUnsupportedStatement(AwkParseError):
    pass


class AwkIOError(AwkError, OSError):
    """Reading input or writing output failed while the program was running."""
    def __init__(self, message: str = "", *, fragment=None, record_number=None):
        super().__init__(message, fragment=fragment)
        self.record_number = record_number
