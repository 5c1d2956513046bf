from __future__ import annotations


class WordFinderError(Exception):
    """Base class for every error raised by the word finder."""


class GridValidationError(WordFinderError, ValueError):
    """The grid handed to the engine cannot be indexed."""


class NullInputError(GridValidationError):
    def __init__(self):
        super().__init__("Required parameter was not provided: grid is None")


class RowCountOutOfRangeError(GridValidationError):
    def __init__(self, row_count: int, max_rows: int):
        self.row_count = row_count
        super().__init__(f"Grid row count must be between 1 and {max_rows}, but it is {row_count}")


class RaggedOrInvalidRowError(GridValidationError):
    def __init__(self, row_index: int, detail: str, max_length: int):
        self.row_index = row_index
        super().__init__(
            f"Grid rows must all have the same length, between 1 and {max_length} "
            f"(row {row_index}: {detail})"
        )


class NonLetterCharacterError(GridValidationError):
    def __init__(self, row_index: int, col_index: int, char: str):
        self.row_index = row_index
        self.col_index = col_index
        self.char = char
        super().__init__(f"Grid must contain only letters, found {char!r} at row {row_index}, column {col_index}")


class InvalidExecutionConfigError(WordFinderError, ValueError):
    """Execution mode or worker count passed to find() is out of range."""
