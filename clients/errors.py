#  (C) Copyright
#  Logivations GmbH, Munich 2025


class ExportError(Exception):
    """Base class for every failure that ends a group export run."""


class ConfigError(ExportError):
    """Client secret or export configuration is missing or malformed."""


class AuthError(ExportError):
    """The authorization code could not be read or exchanged for a token."""


class TokenCacheError(ExportError):
    """The token file could not be written."""


class RemoteError(ExportError):
    """A Directory API call failed."""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        message = f"Unable to {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class PaginationLimitError(RemoteError):
    """More pages were requested than the configured limit allows."""

    def __init__(self, max_pages: int):
        self.max_pages = max_pages
        super().__init__(f"retrieve more than {max_pages} pages of groups")
