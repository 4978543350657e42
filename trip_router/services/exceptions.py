from __future__ import annotations


class RouteError(Exception):
    """Base class for leg-scoped routing failures. Never fatal to a trip."""

    reason = "route_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.reason)
        self.message = message or self.reason


class NoRouteFound(RouteError):
    reason = "no_route_found"


class ProviderError(RouteError):
    reason = "provider_error"

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class LocationUnavailable(RouteError):
    reason = "location_unavailable"

    def __init__(self, anchor: str) -> None:
        super().__init__(f"live location unavailable for {anchor} anchor")
        self.anchor = anchor
