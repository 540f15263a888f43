"""Privileged export/unexport helper supporting both real hardware and mocking."""

import asyncio
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type, Union

from .errors import ExportError, HelperError, UnexportError
from .options import Direction, Pull
from .sysfs import channel_dir, direction_path, value_path

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "gpio-admin"


class GPIOAdmin(ABC):
    """Abstract base class for exporting and unexporting GPIO channels."""

    @abstractmethod
    async def export(self, channel: int, pull: Pull = Pull.NONE) -> None:
        """Ask the kernel to expose a channel's control files.

        Raises:
            ExportError: If the channel could not be exported
        """

    @abstractmethod
    async def unexport(self, channel: int) -> None:
        """Ask the kernel to remove a channel's control files.

        Raises:
            UnexportError: If the channel could not be unexported
        """


class CommandGPIOAdmin(GPIOAdmin):
    """Runs the setuid gpio-admin command line tool."""

    def __init__(self, command: str = DEFAULT_COMMAND) -> None:
        """Initialize the helper.

        Args:
            command: Name or path of the gpio-admin executable
        """
        self._command = command
        logger.info("Using gpio-admin command: %s", command)

    @property
    def command(self) -> str:
        """Executable invoked for export and unexport."""
        return self._command

    async def export(self, channel: int, pull: Pull = Pull.NONE) -> None:
        args = ["export", str(channel)]
        if pull is not Pull.NONE:
            args.append(pull.value)
        await self._run(args, channel, ExportError)

    async def unexport(self, channel: int) -> None:
        await self._run(["unexport", str(channel)], channel, UnexportError)

    async def _run(self, args: List[str], channel: int, error: Type[HelperError]) -> None:
        """Run gpio-admin once and raise ``error`` unless it exits with status 0."""
        argv = [self._command, *args]
        logger.debug("Running: %s", " ".join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as e:
            raise error(channel, stderr=str(e)) from e

        if process.returncode != 0:
            raise error(
                channel,
                returncode=process.returncode,
                stderr=stderr.decode("utf-8", errors="replace"),
            )


class MockGPIOAdmin(GPIOAdmin):
    """Mock helper that fakes the kernel's sysfs tree under a plain directory.

    Exporting a channel creates ``gpio<channel>/direction`` and
    ``gpio<channel>/value``; unexporting removes them. Useful for testing and
    development without hardware or root privileges.
    """

    def __init__(self, root: Union[str, Path, None] = None) -> None:
        """Initialize mock helper.

        Args:
            root: Directory standing in for the sysfs GPIO root. A temporary
                  directory is created when omitted.
        """
        if root is None:
            root = tempfile.mkdtemp(prefix="pi-gpio-")
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._pulls: Dict[int, Pull] = {}
        self._failures: Dict[str, Tuple[int, str]] = {}
        self.calls: List[Tuple[str, int, Optional[Pull]]] = []
        logger.info("MockGPIOAdmin initialized at %s - no hardware required", self._root)

    @property
    def root(self) -> Path:
        """Directory used as the sysfs GPIO root."""
        return self._root

    async def export(self, channel: int, pull: Pull = Pull.NONE) -> None:
        self.calls.append(("export", channel, pull))
        self._raise_if_failing("export", channel, ExportError)
        if self.is_exported(channel):
            raise ExportError(channel, returncode=1, stderr="Device or resource busy")

        channel_dir(self._root, channel).mkdir(parents=True, exist_ok=True)
        direction_path(self._root, channel).write_text(Direction.IN.value + "\n", encoding="utf-8")
        # An input with a pull-up idles high
        initial = "1" if pull is Pull.UP else "0"
        value_path(self._root, channel).write_text(initial + "\n", encoding="utf-8")
        self._pulls[channel] = pull
        logger.debug("Mock export: channel=%d, pull=%s", channel, pull.name)

    async def unexport(self, channel: int) -> None:
        self.calls.append(("unexport", channel, None))
        self._raise_if_failing("unexport", channel, UnexportError)
        if not self.is_exported(channel):
            raise UnexportError(channel, returncode=1, stderr="Invalid argument")

        shutil.rmtree(channel_dir(self._root, channel))
        self._pulls.pop(channel, None)
        logger.debug("Mock unexport: channel=%d", channel)

    # Mock-specific methods for testing

    def fail_next(self, action: str, returncode: int = 1, stderr: str = "") -> None:
        """Make the next ``export`` or ``unexport`` call fail with the given status."""
        if action not in ("export", "unexport"):
            raise ValueError(f"Invalid action: {action}")
        self._failures[action] = (returncode, stderr)

    def is_exported(self, channel: int) -> bool:
        """Check whether a channel is currently exported."""
        return channel_dir(self._root, channel).is_dir()

    def get_pull(self, channel: int) -> Optional[Pull]:
        """Get the pull resistor a channel was exported with."""
        return self._pulls.get(channel)

    def _raise_if_failing(self, action: str, channel: int, error: Type[HelperError]) -> None:
        failure = self._failures.pop(action, None)
        if failure is not None:
            returncode, stderr = failure
            raise error(channel, returncode=returncode, stderr=stderr)


def get_gpio_admin(
    mock: bool,
    command: str = DEFAULT_COMMAND,
    root: Union[str, Path, None] = None,
) -> GPIOAdmin:
    """Get the appropriate helper implementation.

    Args:
        mock: If True, use the mock helper. If False, run gpio-admin.
        command: gpio-admin executable (real helper only)
        root: Fake sysfs root (mock helper only)

    Returns:
        GPIOAdmin implementation (MockGPIOAdmin or CommandGPIOAdmin)
    """
    if mock:
        return MockGPIOAdmin(root)
    return CommandGPIOAdmin(command)
