"""GPIO controller performing pin lifecycle operations through sysfs.

Every public method validates its arguments immediately, raising
``InvalidPinError`` or ``InvalidDirectionError`` before anything touches the
system, and returns an awaitable that performs the operation. The awaitable
either returns the result or raises exactly one ``GPIOError``.

Example:
    controller = GPIOController(get_gpio_admin(mock=False))
    await controller.open(7, "in pullup")
    value = await controller.read(7)
    await controller.close(7)
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Optional, Type, Union

from .errors import (
    DirectionReadError,
    DirectionWriteError,
    HelperError,
    InvalidDirectionError,
    SysfsError,
    ValueReadError,
    ValueWriteError,
)
from .gpio_admin import GPIOAdmin, MockGPIOAdmin, get_gpio_admin
from .options import Direction, PinOptions, coerce_value, normalize_direction, parse_options
from .pins import PIN_MAPPING, PinId, resolve_pin
from .sysfs import detect_sysfs_root, direction_path, value_path

if TYPE_CHECKING:
    from .config import ConfigManager

logger = logging.getLogger(__name__)


class GPIOController:
    """Opens, configures, reads, writes and closes header pins.

    The controller keeps no per-pin state. The kernel owns whether a pin is
    exported and which direction it has; each call re-derives the channel
    from the pin mapping and issues one request.
    """

    def __init__(
        self,
        gpio_admin: GPIOAdmin,
        sysfs_root: Union[str, Path, None] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            gpio_admin: Helper used to export and unexport channels
            sysfs_root: GPIO root directory. Probed once with
                        detect_sysfs_root() when omitted.
        """
        self._gpio_admin = gpio_admin
        self._sysfs_root = Path(sysfs_root) if sysfs_root is not None else detect_sysfs_root()

    @classmethod
    def from_config(cls, config: "ConfigManager", mock: bool = False) -> "GPIOController":
        """Build a controller from loaded configuration.

        With ``mock`` set, a MockGPIOAdmin fakes the sysfs tree and its root
        replaces the configured one.
        """
        if mock:
            admin = MockGPIOAdmin(config.get("sysfs.root"))
            return cls(admin, admin.root)
        admin = get_gpio_admin(mock=False, command=config.get_gpio_admin_command())
        return cls(admin, config.get_sysfs_root())

    @property
    def sysfs_root(self) -> Path:
        """GPIO root directory captured at construction."""
        return self._sysfs_root

    @property
    def gpio_admin(self) -> GPIOAdmin:
        """Helper used for export and unexport."""
        return self._gpio_admin

    def open(self, pin: PinId, options: Optional[str] = "") -> Awaitable[None]:
        """Export a pin and set its direction.

        Args:
            pin: Header pin number
            options: Whitespace separated options, e.g. "in pullup".
                     Defaults to an output without pull resistor.

        Raises:
            InvalidPinError: Immediately, if the pin is not mapped

        The awaitable raises ExportError if gpio-admin fails, in which case
        the direction is never written, or DirectionWriteError if the
        direction cannot be set. The pin stays exported in the latter case.
        """
        number = resolve_pin(pin)
        return self._open(number, parse_options(options))

    def set_direction(self, pin: PinId, direction: Union[Direction, str]) -> Awaitable[None]:
        """Write "in" or "out" to a pin's direction file.

        Raises:
            InvalidPinError: Immediately, if the pin is not mapped
            InvalidDirectionError: Immediately, if the direction is unknown
        """
        number = resolve_pin(pin)
        return self._write_direction(PIN_MAPPING[number], normalize_direction(direction))

    def get_direction(self, pin: PinId) -> Awaitable[Direction]:
        """Read a pin's current direction from the kernel."""
        number = resolve_pin(pin)
        return self._read_direction(PIN_MAPPING[number])

    def close(self, pin: PinId) -> Awaitable[None]:
        """Unexport a pin."""
        number = resolve_pin(pin)
        return self._close(number)

    def read(self, pin: PinId) -> Awaitable[int]:
        """Read a pin's value (0 or 1)."""
        number = resolve_pin(pin)
        return self._read_value(PIN_MAPPING[number])

    def write(self, pin: PinId, value: object = 0) -> Awaitable[None]:
        """Drive an output pin high for a truthy value and low otherwise."""
        number = resolve_pin(pin)
        return self._write_value(PIN_MAPPING[number], coerce_value(value))

    async def _open(self, pin: int, options: PinOptions) -> None:
        """Export the pin's channel, then write its direction."""
        channel = PIN_MAPPING[pin]
        try:
            await self._gpio_admin.export(channel, options.pull)
        except HelperError as e:
            self._log_helper_failure("open", pin, e)
            raise
        logger.info("Exported pin %d (channel %d)", pin, channel)
        await self._write_direction(channel, options.direction)

    async def _close(self, pin: int) -> None:
        """Unexport the pin's channel."""
        channel = PIN_MAPPING[pin]
        try:
            await self._gpio_admin.unexport(channel)
        except HelperError as e:
            self._log_helper_failure("close", pin, e)
            raise
        logger.info("Unexported pin %d (channel %d)", pin, channel)

    async def _write_direction(self, channel: int, direction: Direction) -> None:
        """Write "in" or "out" to a channel's direction file."""
        path = direction_path(self._sysfs_root, channel)
        await self._write_file(path, direction.value, DirectionWriteError)

    async def _read_direction(self, channel: int) -> Direction:
        """Read and normalize a channel's direction file."""
        path = direction_path(self._sysfs_root, channel)
        content = await self._read_file(path, DirectionReadError)
        try:
            return normalize_direction(content)
        except InvalidDirectionError as e:
            raise DirectionReadError(path, f"unrecognized direction {content.strip()!r}") from e

    async def _read_value(self, channel: int) -> int:
        """Read a channel's value file as a base-10 integer."""
        path = value_path(self._sysfs_root, channel)
        content = await self._read_file(path, ValueReadError)
        try:
            return int(content.strip(), 10)
        except ValueError as e:
            raise ValueReadError(path, f"not an integer: {content.strip()!r}") from e

    async def _write_value(self, channel: int, value: str) -> None:
        """Write "1" or "0" to a channel's value file."""
        path = value_path(self._sysfs_root, channel)
        await self._write_file(path, value, ValueWriteError)

    @staticmethod
    async def _write_file(path: Path, data: str, error: Type[SysfsError]) -> None:
        """Write a control file off the event loop, raising ``error`` on OSError."""
        logger.debug("Writing %r to %s", data, path)
        try:
            await asyncio.to_thread(path.write_text, data, encoding="utf-8")
        except OSError as e:
            raise error(path, e.strerror or str(e)) from e

    @staticmethod
    async def _read_file(path: Path, error: Type[SysfsError]) -> str:
        """Read a control file off the event loop, raising ``error`` on OSError."""
        logger.debug("Reading %s", path)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise error(path, e.strerror or str(e)) from e

    @staticmethod
    def _log_helper_failure(method: str, pin: int, error: HelperError) -> None:
        """Log which operation failed on which pin, with gpio-admin's stderr."""
        logger.error("Error when trying to %s pin %d", method, pin)
        if error.stderr:
            logger.error(error.stderr.rstrip())
