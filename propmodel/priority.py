"""Constraint priorities and their ordering."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from functools import total_ordering


class Status(enum.Enum):
    """Kind of constraint a priority belongs to."""

    REGULAR = "Regular"
    STAY = "Stay"


@total_ordering
@dataclass(frozen=True)
class Priority:
    """Priority of a constraint.

    Ordering by strength, from least to most important::

        Stay:    0, 1, 2, ...   then   Regular: ..., 2, 1, 0

    Every stay priority is weaker than every regular one.  Among stay
    priorities a larger strength is stronger; among regular ones a smaller
    strength is stronger, with ``Regular 0`` meaning "required".
    """

    status: Status
    strength: int = 0

    def __post_init__(self) -> None:
        if self.strength < 0:
            raise ValueError(f"strength must be non-negative, got {self.strength}")

    @classmethod
    def regular(cls, strength: int) -> Priority:
        """A priority for an ordinary constraint."""
        return cls(Status.REGULAR, strength)

    @classmethod
    def stay(cls, strength: int) -> Priority:
        """A priority for a stay constraint."""
        return cls(Status.STAY, strength)

    def stronger(self) -> Priority:
        """The priority one step more important, saturating at Regular 0."""
        if self.status is Status.STAY:
            return replace(self, strength=self.strength + 1)
        if self.strength != 0:
            return replace(self, strength=self.strength - 1)
        return self

    def weaker(self) -> Priority:
        """The priority one step less important, saturating at Stay 0."""
        if self.status is Status.REGULAR:
            return replace(self, strength=self.strength + 1)
        if self.strength != 0:
            return replace(self, strength=self.strength - 1)
        return self

    def is_required(self) -> bool:
        """Whether this is the strongest regular priority."""
        return self.status is Status.REGULAR and self.strength == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        if self.status is not other.status:
            return self.status is Status.STAY
        if self.status is Status.STAY:
            return self.strength < other.strength
        return self.strength > other.strength

    def __str__(self) -> str:
        return f"{self.status.value} with strength = {self.strength}"


MIN_STAY_PRIORITY = Priority.stay(0)
MAX_REGULAR_PRIORITY = Priority.regular(0)