"""ROM file loader: reads raw CHIP-8 program images from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import RomTooLargeError
from ..memory.ram import MAX_ROM_SIZE

if TYPE_CHECKING:
    from ..cpu.cpu import Chip8

logger = logging.getLogger(__name__)


def read_rom(path: str | Path) -> bytes:
    """Read a ROM image and check that it fits in program memory.

    ROMs are raw big-endian instruction streams with no header.

    Args:
        path: Path to the ROM file.

    Returns:
        The ROM bytes.

    Raises:
        RomTooLargeError: If the file is larger than 3584 bytes.
        OSError: If the file cannot be read.
    """
    data = Path(path).read_bytes()
    if len(data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(data), MAX_ROM_SIZE)
    if len(data) % 2:
        logger.warning("ROM %s has odd length %d", path, len(data))
    logger.info("Read %d byte ROM from %s", len(data), path)
    return data


def load_rom_file(vm: Chip8, path: str | Path) -> int:
    """Read a ROM file into a VM. Returns the number of bytes loaded."""
    data = read_rom(path)
    vm.load_rom(data)
    return len(data)
