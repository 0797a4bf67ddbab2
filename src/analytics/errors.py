"""Exceptions raised by the analytics pipeline."""


class UpstreamError(Exception):
    """The order-listing API failed or returned a body we cannot use.

    Raised for the whole collection attempt; no partial result accompanies it.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(Exception):
    """Settings are missing or name an unknown adapter."""
