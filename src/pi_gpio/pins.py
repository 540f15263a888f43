"""Header pin to GPIO channel mapping for the 40-pin Raspberry Pi header.

Header pins use physical (BOARD) numbering. Channels are the kernel's GPIO
numbers as exposed under sysfs. Power and ground pins are not mapped.
See https://pinout.xyz for the header layout.
"""

import re
from types import MappingProxyType
from typing import Mapping, Union

from .errors import InvalidPinError

PinId = Union[int, str]

PIN_MAPPING: Mapping[int, int] = MappingProxyType(
    {
        3: 8,
        5: 9,
        7: 7,
        8: 14,
        10: 16,
        11: 0,
        12: 1,
        13: 2,
        15: 3,
        16: 4,
        18: 5,
        19: 12,
        21: 13,
        22: 6,
        23: 14,
        24: 10,
        26: 11,
        27: 30,
        28: 31,
        29: 21,
        31: 22,
        32: 26,
        33: 23,
        35: 24,
        36: 27,
        37: 25,
        38: 28,
        40: 29,
    }
)

_PIN_PATTERN = re.compile(r"[1-9][0-9]*")


def resolve_pin(pin: PinId) -> int:
    """Validate a header pin identifier.

    Args:
        pin: Header pin as an int or a decimal string (e.g. 7 or "7")

    Returns:
        The header pin number

    Raises:
        InvalidPinError: If the identifier is not numeric or the pin is not mapped
    """
    if isinstance(pin, bool):
        raise InvalidPinError(pin)
    if isinstance(pin, int):
        number = pin
    elif isinstance(pin, str) and _PIN_PATTERN.fullmatch(pin):
        number = int(pin)
    else:
        raise InvalidPinError(pin)

    if number not in PIN_MAPPING:
        raise InvalidPinError(pin)
    return number


def channel_for(pin: PinId) -> int:
    """Return the GPIO channel wired to a header pin."""
    return PIN_MAPPING[resolve_pin(pin)]
