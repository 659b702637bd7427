"""Task priorities used by spawn groups."""

from __future__ import annotations

from enum import IntEnum


class Priority(IntEnum):
    """Importance of a spawned task.

    Spawn groups rank their tasks by priority; the order only matters
    when the group's tasks are waited for.
    """

    BACKGROUND = 0
    LOW = 1
    UTILITY = 2
    MEDIUM = 3
    HIGH = 4
    USERINITIATED = 5

    @classmethod
    def default(cls) -> Priority:
        """Return the priority used when none is given."""
        return cls.MEDIUM