class ConfigError(ValueError):
    """Unknown mode, empty catalog or inconsistent tables. Raised before play starts."""


class SessionError(RuntimeError):
    """An operation was called in a phase that does not allow it."""
