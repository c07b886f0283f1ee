"""Error types raised inside the conversion pipeline."""


class Book2TextError(Exception):
    """Base class for every conversion failure."""


class InputNotFoundError(Book2TextError):
    """Input file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Input file not found: {path}")


class UnsupportedInputFormatError(Book2TextError):
    """Input file extension has no processor."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported input format: {extension or '(none)'}")


class UnsupportedOutputFormatError(Book2TextError):
    """Requested output format has no converter."""

    def __init__(self, output_format: str):
        self.output_format = output_format
        super().__init__(f"Unsupported output format: {output_format}")


class ProcessingError(Book2TextError):
    """A processor could not open or parse its input container."""


class ConversionError(Book2TextError):
    """A converter failed to render a document."""


class OutputError(Book2TextError):
    """The output directory or file could not be prepared or written."""
