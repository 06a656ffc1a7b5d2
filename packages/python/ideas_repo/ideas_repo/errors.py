"""Domain-level errors for the ideas repository."""


class IdeaNotFoundError(Exception):
    """Raised when an idea cannot be located."""


class CommentNotFoundError(Exception):
    """Raised when a parent comment cannot be located for a reply."""


class PermissionDeniedError(Exception):
    """Raised when a user lacks permissions to perform an action."""


class InvalidStatusError(ValueError):
    """Raised for status values outside the idea lifecycle."""


class InvalidStatusTransitionError(Exception):
    """Raised when a status change would move an idea backwards."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move idea from '{current}' to '{target}'")
        self.current = current
        self.target = target
