"""Exception hierarchy for the feeds generator.

Record-level problems are logged and skipped, they never raise.
Everything raised from here is fatal for the run.
"""


class FeedsError(Exception):
    """Base exception for all feed generation failures."""


class FeedsConfigError(FeedsError):
    """Raised for invalid runtime configuration."""


class FetchError(FeedsError):
    """Raised when the CMS cannot be reached or returns no data container."""


class SerializationError(FeedsError):
    """Raised when a calendar or feed document cannot be rendered."""


class WriteError(FeedsError):
    """Raised when an output file cannot be written."""
