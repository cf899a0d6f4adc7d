# wordcount/errors.py
"""
Error types raised by the counting pipeline.

I/O problems are plain OSError and are never caught inside the core.
"""


class ConfigurationError(ValueError):
    """Invalid or missing memory-bound parameters. Raised before any work starts."""


class MalformedRecordError(ValueError):
    """A run line that does not parse as token<TAB>count."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
