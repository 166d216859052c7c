"""Filesystem subscription errors."""


class SubscriptionError(Exception):
    """Base class for Watch Loop subscription failures."""

    pass


class SubscriptionSetupFailed(SubscriptionError):
    """The initial subscription could not be established (fatal at startup)."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Cannot watch {path}: {message}")
        self.path = path


class SubscriptionRuntimeError(SubscriptionError):
    """An error reported by a live subscription (logged, loop continues)."""

    pass
