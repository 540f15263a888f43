"""Command-line entry point for pi-gpio."""

import argparse
import asyncio
import logging
import sys
from typing import Awaitable, List, NoReturn, Optional

from pi_gpio.config import ConfigError, ConfigManager
from pi_gpio.controller import GPIOController
from pi_gpio.errors import GPIOError
from pi_gpio.gpio_admin import MockGPIOAdmin
from pi_gpio.pins import PIN_MAPPING

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging for the application.

    Args:
        debug: If True, set log level to DEBUG, otherwise WARNING
    """
    log_level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed command-line arguments
    """
    parser = argparse.ArgumentParser(
        description="Control Raspberry Pi header pins through sysfs and gpio-admin"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: built-in settings)",
    )
    parser.add_argument(
        "--mock-gpio",
        action="store_true",
        help="Use a fake sysfs tree instead of real hardware (for testing)",
    )
    parser.add_argument(
        "--mock-root",
        type=str,
        default=None,
        help="Directory holding the fake sysfs tree (default: sysfs.root from the config)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("pins", help="List header pins and their GPIO channels")

    open_parser = commands.add_parser("open", help="Export a pin and set its direction")
    open_parser.add_argument("pin", help="Header pin number")
    open_parser.add_argument("options", nargs="*", help="Options, e.g. 'in pullup'")

    close_parser = commands.add_parser("close", help="Unexport a pin")
    close_parser.add_argument("pin", help="Header pin number")

    read_parser = commands.add_parser("read", help="Print a pin's value")
    read_parser.add_argument("pin", help="Header pin number")

    write_parser = commands.add_parser("write", help="Set an output pin's value")
    write_parser.add_argument("pin", help="Header pin number")
    write_parser.add_argument("value", help="1 for high, 0 for low")

    direction_parser = commands.add_parser("direction", help="Print or set a pin's direction")
    direction_parser.add_argument("pin", help="Header pin number")
    direction_parser.add_argument("direction", nargs="?", help="'in' or 'out'")

    return parser.parse_args(argv)


def _build_controller(args: argparse.Namespace, config: ConfigManager) -> GPIOController:
    if not args.mock_gpio:
        return GPIOController.from_config(config)
    if args.mock_root:
        admin = MockGPIOAdmin(args.mock_root)
        return GPIOController(admin, admin.root)
    if not config.get("sysfs.root"):
        raise ConfigError("--mock-gpio needs --mock-root or sysfs.root in the config file")
    return GPIOController.from_config(config, mock=True)


def _dispatch(args: argparse.Namespace, controller: GPIOController) -> Awaitable[object]:
    """Start the operation selected on the command line."""
    if args.command == "open":
        return controller.open(args.pin, " ".join(args.options))
    if args.command == "close":
        return controller.close(args.pin)
    if args.command == "read":
        return controller.read(args.pin)
    if args.command == "write":
        return controller.write(args.pin, args.value)
    if args.direction is not None:
        return controller.set_direction(args.pin, args.direction)
    return controller.get_direction(args.pin)


async def _await(operation: Awaitable[object]) -> object:
    return await operation


def run(argv: Optional[List[str]] = None) -> int:
    """Run one command.

    Returns:
        Process exit status
    """
    args = parse_args(argv)
    setup_logging(args.debug)

    if args.command == "pins":
        for pin, channel in PIN_MAPPING.items():
            print(f"{pin:>2} -> {channel}")
        return 0

    try:
        config = ConfigManager(args.config)
        controller = _build_controller(args, config)
        result = asyncio.run(_await(_dispatch(args, controller)))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except GPIOError as e:
        logger.error("%s", e)
        return 1

    if args.command == "read":
        print(result)
    elif args.command == "direction" and args.direction is None:
        print(result.value)  # type: ignore[attr-defined]
    return 0


def main() -> NoReturn:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
