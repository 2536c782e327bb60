from __future__ import annotations
"""
Error taxonomy for the stats pipeline.

AuthError and UpstreamItemsError abort a /stats request.
UpstreamCallsError is recovered inside the orchestrator and never reaches the caller.
"""


class StatsError(Exception):
    """Base class for failures while building a stats response"""
    pass


class AuthError(StatsError):
    """Raised when the Avito token exchange fails or returns an unusable body"""
    pass


class UpstreamItemsError(StatsError):
    """Raised when the item-stats endpoint cannot be fetched or parsed"""
    pass


class UpstreamCallsError(StatsError):
    """Raised when the call-stats endpoint cannot be fetched or parsed"""
    pass


class InvalidRequestError(StatsError):
    """Raised when request parameters cannot be turned into an upstream call"""
    pass
