"""Pin direction, pull resistor and value handling."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import InvalidDirectionError


class Direction(str, Enum):
    """Pin direction as written to the sysfs direction file."""

    IN = "in"
    OUT = "out"


class Pull(str, Enum):
    """Pull resistor argument passed to gpio-admin export."""

    NONE = ""
    UP = "pullup"
    DOWN = "pulldown"


_DIRECTION_TOKENS = {
    "in": Direction.IN,
    "input": Direction.IN,
    "out": Direction.OUT,
    "output": Direction.OUT,
}

_PULL_TOKENS = {
    "pullup": Pull.UP,
    "up": Pull.UP,
    "pulldown": Pull.DOWN,
    "down": Pull.DOWN,
}


@dataclass(frozen=True)
class PinOptions:
    """Configuration requested when opening a pin."""

    direction: Direction = Direction.OUT
    pull: Pull = Pull.NONE


def parse_options(options: Optional[str]) -> PinOptions:
    """Parse a whitespace separated option string such as "in pullup".

    Tokens are case-sensitive. Unknown tokens are ignored. Any input token
    selects input regardless of order; output is the default otherwise. When
    several pull tokens appear, the last one wins.

    Args:
        options: Option string, or None for defaults

    Returns:
        PinOptions with direction defaulting to OUT and pull to NONE
    """
    direction = Direction.OUT
    pull = Pull.NONE
    for token in (options or "").split():
        if _DIRECTION_TOKENS.get(token) is Direction.IN:
            direction = Direction.IN
        elif token in _PULL_TOKENS:
            pull = _PULL_TOKENS[token]
    return PinOptions(direction=direction, pull=pull)


def normalize_direction(direction: Union[Direction, str, None]) -> Direction:
    """Normalize a direction string to Direction.IN or Direction.OUT.

    Matching is case-insensitive and ignores surrounding whitespace.
    An empty string or None means output.

    Raises:
        InvalidDirectionError: If the value is not a known direction
    """
    if isinstance(direction, Direction):
        return direction
    if direction is None:
        return Direction.OUT
    if not isinstance(direction, str):
        raise InvalidDirectionError(direction)

    token = direction.strip().lower()
    if not token:
        return Direction.OUT
    try:
        return _DIRECTION_TOKENS[token]
    except KeyError:
        raise InvalidDirectionError(direction) from None


def coerce_value(value: object) -> str:
    """Convert a value to the "1"/"0" string written to a value file.

    Strings are read by content, so "0" is low. Everything else follows
    Python truthiness.
    """
    if isinstance(value, str):
        value = value.strip() not in ("", "0")
    return "1" if value else "0"
