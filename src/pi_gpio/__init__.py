"""GPIO pin control for Raspberry Pi header pins via sysfs and gpio-admin."""

from .controller import GPIOController
from .errors import (
    DirectionReadError,
    DirectionWriteError,
    ExportError,
    GPIOError,
    HelperError,
    InvalidDirectionError,
    InvalidPinError,
    SysfsError,
    UnexportError,
    ValueReadError,
    ValueWriteError,
)
from .gpio_admin import CommandGPIOAdmin, GPIOAdmin, MockGPIOAdmin, get_gpio_admin
from .options import Direction, PinOptions, Pull, coerce_value, normalize_direction, parse_options
from .pins import PIN_MAPPING, channel_for, resolve_pin
from .sysfs import detect_sysfs_root

__all__ = [
    "GPIOController",
    "GPIOAdmin",
    "CommandGPIOAdmin",
    "MockGPIOAdmin",
    "get_gpio_admin",
    "PIN_MAPPING",
    "resolve_pin",
    "channel_for",
    "Direction",
    "Pull",
    "PinOptions",
    "parse_options",
    "normalize_direction",
    "coerce_value",
    "detect_sysfs_root",
    "GPIOError",
    "InvalidPinError",
    "InvalidDirectionError",
    "HelperError",
    "ExportError",
    "UnexportError",
    "SysfsError",
    "DirectionWriteError",
    "DirectionReadError",
    "ValueReadError",
    "ValueWriteError",
]
