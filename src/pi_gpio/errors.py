"""Exceptions raised by GPIO operations."""

from pathlib import Path
from typing import Optional, Union


class GPIOError(Exception):
    """Base class for all GPIO errors."""


class InvalidPinError(GPIOError, ValueError):
    """Raised when a pin identifier does not resolve to a GPIO channel."""

    def __init__(self, pin: object) -> None:
        super().__init__(f"Pin number isn't valid: {pin!r}")
        self.pin = pin


class InvalidDirectionError(GPIOError, ValueError):
    """Raised when a direction is neither input nor output."""

    def __init__(self, direction: object) -> None:
        super().__init__(f"Direction must be 'input' or 'output', got {direction!r}")
        self.direction = direction


class HelperError(GPIOError):
    """Raised when the gpio-admin helper fails or cannot be started."""

    action = "run gpio-admin for"

    def __init__(
        self,
        channel: int,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        detail = stderr.strip() or (
            f"exit status {returncode}" if returncode is not None else "could not be started"
        )
        super().__init__(f"Failed to {self.action} GPIO channel {channel}: {detail}")
        self.channel = channel
        self.returncode = returncode
        self.stderr = stderr


class ExportError(HelperError):
    """Raised when exporting a channel fails."""

    action = "export"


class UnexportError(HelperError):
    """Raised when unexporting a channel fails."""

    action = "unexport"


class SysfsError(GPIOError):
    """Raised when a sysfs control file cannot be read or written."""

    action = "access"

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Failed to {self.action} {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class DirectionWriteError(SysfsError):
    """Raised when writing a pin's direction file fails."""

    action = "write direction to"


class DirectionReadError(SysfsError):
    """Raised when a pin's direction file is unreadable or holds an unknown value."""

    action = "read direction from"


class ValueReadError(SysfsError):
    """Raised when a pin's value file is unreadable or not an integer."""

    action = "read value from"


class ValueWriteError(SysfsError):
    """Raised when writing a pin's value file fails."""

    action = "write value to"
