class QualityToolError(Exception):
    """Base class for every fatal error raised by the quality tools."""
    pass


class IoOpenError(QualityToolError):
    """Raised when an input or output path cannot be opened."""
    def __init__(self, role: str, path: str, reason: str):
        self.role = role
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to open {role} file: {path} - [{reason}]")


class MalformedRecordError(QualityToolError):
    """Raised when a record cannot be read completely."""
    pass


class LineTooLongError(MalformedRecordError):
    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(
            f"Line {line_number} exceeds the maximum line length of {max_line_length:,} bytes"
        )


class QualityRangeError(MalformedRecordError):
    def __init__(self, record_index: int, position: int, value: int):
        self.record_index = record_index
        self.position = position
        self.value = value
        super().__init__(
            f"Record {record_index}: quality byte {value} at position {position} "
            f"is outside the Phred+33 range [33, 96]"
        )


class InvalidCommandError(QualityToolError):
    """Raised for an unrecognised subcommand or option."""
    pass


class UsageError(QualityToolError):
    """Raised when the arguments are missing or malformed."""
    pass
