"""Structured result returned by the conversion entry point."""

from pydantic import BaseModel


class ConversionResult(BaseModel):
    """Outcome of a single conversion call."""

    success: bool
    input_file: str | None = None
    output_file: str | None = None
    output_format: str | None = None
    error: str | None = None
    warning: str | None = None

    @classmethod
    def ok(
        cls,
        input_file: str,
        output_file: str,
        output_format: str,
        warning: str | None = None,
    ) -> "ConversionResult":
        return cls(
            success=True,
            input_file=input_file,
            output_file=output_file,
            output_format=output_format,
            warning=warning,
        )

    @classmethod
    def failed(cls, error: str, input_file: str | None = None) -> "ConversionResult":
        return cls(success=False, input_file=input_file, error=error)
