"""Location of the kernel's sysfs GPIO tree."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

SYSFS_ROOT_NEW = "/sys/class/gpio"  # kernel 3.18 and later
SYSFS_ROOT_OLD = "/sys/devices/virtual/gpio"

DIRECTION_FILE = "direction"
VALUE_FILE = "value"


def detect_sysfs_root(
    new_root: Union[str, Path] = SYSFS_ROOT_NEW,
    old_root: Union[str, Path] = SYSFS_ROOT_OLD,
) -> Path:
    """Pick the sysfs GPIO root for the running kernel.

    Args:
        new_root: Path used by newer kernels, chosen if it exists
        old_root: Fallback path for older kernels

    Returns:
        The GPIO root directory
    """
    if Path(new_root).exists():
        root = Path(new_root)
    else:
        root = Path(old_root)
    logger.info("Using sysfs GPIO root: %s", root)
    return root


def channel_dir(root: Path, channel: int) -> Path:
    """Return the directory the kernel creates for an exported channel."""
    return root / f"gpio{channel}"


def direction_path(root: Path, channel: int) -> Path:
    """Return the direction control file of a channel."""
    return channel_dir(root, channel) / DIRECTION_FILE


def value_path(root: Path, channel: int) -> Path:
    """Return the value control file of a channel."""
    return channel_dir(root, channel) / VALUE_FILE
