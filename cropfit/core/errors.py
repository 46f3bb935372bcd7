from typing import Optional


class CropfitError(Exception):
    """Base class for domain errors raised by cropfit services."""


class InvalidInput(CropfitError):
    """Malformed coordinate, non-positive farm size or unknown season/soil tag."""


class UpstreamUnavailable(CropfitError):
    """An environmental data provider failed and no cached value was available."""

    def __init__(self, kind: str, detail: Optional[str] = None) -> None:
        self.kind = kind
        self.detail = detail
        message = f"{kind} data is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InsufficientInputData(CropfitError):
    """The scoring engine was invoked without an environmental snapshot."""
