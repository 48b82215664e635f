"""Common schedview-specific exceptions."""


class SchedViewValueError(ValueError):
    """Raised when schedview detects invalid user-provided data."""


class NoScheduleDataError(RuntimeError):
    """Raised when an aggregate view is requested over a schedule without tasks."""


__all__ = ["SchedViewValueError", "NoScheduleDataError"]
