class LivetrackError(Exception):
    """Base exception for livetrack failures."""


class TelemetryFeedError(LivetrackError):
    """Raised when the telemetry message bus cannot be reached at startup."""


class AdminLoginRequired(LivetrackError):
    """Raised when a protected admin endpoint is hit without a valid session."""


class FeatureDisabled(LivetrackError):
    """Raised when a view is requested while the operator has disabled it."""
