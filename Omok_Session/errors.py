"""Exceptions raised by the session engine (rejections are values, see models.Rejected)."""


class CorruptSave(ValueError):
    """A serialized game could not be replayed into the exact recorded state."""


class ReentrantCallError(RuntimeError):
    """A listener tried to mutate the game while a notification was being delivered."""
