"""Exceptions raised while clipping an article."""


class ClipperError(Exception):
    """Base exception for all clipper errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class NetworkFault(ClipperError):
    """Raised when a page cannot be fetched.

    Covers both transport failures (no response at all) and non-2xx
    responses for the article page itself.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        *args,
        **kwargs,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, *args, **kwargs)


class ExtractionFault(ClipperError):
    """Raised when no readable content region can be found."""

    pass


class StorageFault(ClipperError):
    """Raised when a folder or file cannot be created in the store."""

    def __init__(self, message: str, path: str | None = None, *args, **kwargs):
        self.path = path
        super().__init__(message, *args, **kwargs)


class TitleCollisionError(StorageFault):
    """Raised when a clip folder already exists and collisions are not allowed."""

    pass


class AssetFault(ClipperError):
    """Raised when an asset exhausts its download attempts."""

    def __init__(self, message: str, url: str, attempts: int, *args, **kwargs):
        self.url = url
        self.attempts = attempts
        super().__init__(message, *args, **kwargs)


class ConfigError(ClipperError):
    """Raised when persisted configuration is unreadable or invalid."""

    pass
