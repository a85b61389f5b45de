"""Present-or-missing wrapper for optional company data fields."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Available(Generic[T]):
    """A field whose value was obtained."""
    value: T


@dataclass(frozen=True)
class Unavailable:
    """A field that could not be obtained, with the reason why."""
    reason: str


MaybeAvailable = Union[Available[T], Unavailable]


def value_or_none(field: "MaybeAvailable[T]") -> Optional[T]:
    """Unwrap an Available field, or None when it is Unavailable."""
    if isinstance(field, Available):
        return field.value
    return None
