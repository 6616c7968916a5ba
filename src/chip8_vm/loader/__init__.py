"""ROM loader module."""

from .rom import MAX_ROM_SIZE, load_rom_file, read_rom

__all__ = ["MAX_ROM_SIZE", "load_rom_file", "read_rom"]
