"""Exceptions raised by the shortlink core.

Nothing in here knows about HTTP; ``web_app`` maps these to status codes.
"""


class ValidationError(ValueError):
    """A submitted URL was rejected. Always caused by the client."""


class EncodingError(ValidationError):
    """The submitted bytes are not valid UTF-8."""


class MalformedUrl(ValidationError):
    """The submitted text does not parse as a URL."""


class MissingScheme(ValidationError):
    """The URL has no scheme."""


class UnsupportedScheme(ValidationError):
    """The URL scheme is not in the allow-list."""


class StoreError(Exception):
    """Opening, reading, writing or committing the link store failed.

    The request that hit it failed; the process keeps serving.
    """
