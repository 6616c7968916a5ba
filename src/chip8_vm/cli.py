"""Command-line interface for the CHIP-8 emulator."""

import argparse
import logging
import random
import sys

from .cpu.cpu import Chip8
from .cpu.keypad import NUM_KEYS
from .errors import Chip8Error, Chip8FatalError
from .loader.rom import load_rom_file, read_rom
from .memory.ram import PROGRAM_START
from .tui.disasm import disassemble_rom
from .tui.display import format_display_ascii

DEFAULT_FRAMES = 60
DEFAULT_STEPS_PER_FRAME = 10


def _parse_key(value: str) -> int:
    """Parse a --keys entry: a single hex digit 0-F.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid key.
    """
    try:
        key = int(value, 16)
    except ValueError:
        key = -1
    if not 0 <= key < NUM_KEYS:
        raise argparse.ArgumentTypeError(
            f"invalid key '{value}', expected a hex digit 0-F"
        )
    return key


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHIP-8 Emulator")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Run a ROM headless and print the display")
    run_parser.add_argument("rom", help="Path to ROM file")
    run_parser.add_argument(
        "--frames", type=_positive_int, default=DEFAULT_FRAMES,
        help=f"Number of 60 Hz frames to run (default: {DEFAULT_FRAMES})",
    )
    run_parser.add_argument(
        "--steps-per-frame", type=_positive_int, default=DEFAULT_STEPS_PER_FRAME,
        help=f"Instructions per frame (default: {DEFAULT_STEPS_PER_FRAME})",
    )
    run_parser.add_argument("--seed", type=int, default=None, help="Seed for RND")
    run_parser.add_argument(
        "--keys", nargs="*", type=_parse_key, default=[], metavar="KEY",
        help="Hex keys held down for the whole run",
    )

    debug_parser = sub.add_parser("debug", help="Run with TUI debugger")
    debug_parser.add_argument("rom", help="Path to ROM file to debug")
    debug_parser.add_argument("--seed", type=int, default=None, help="Seed for RND")

    disasm_parser = sub.add_parser("disasm", help="Disassemble a ROM")
    disasm_parser.add_argument("rom", help="Path to ROM file")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the emulator CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "run":
            run_rom(args.rom, args.frames, args.steps_per_frame, args.seed, args.keys)
        elif args.command == "debug":
            from .tui.app import run_debugger
            run_debugger(args.rom, args.seed)
        elif args.command == "disasm":
            disassemble_file(args.rom)
        else:
            parser.print_help()
            sys.exit(1)
    except (Chip8Error, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def run_rom(
    path: str,
    frames: int = DEFAULT_FRAMES,
    steps_per_frame: int = DEFAULT_STEPS_PER_FRAME,
    seed: int | None = None,
    keys: list[int] | None = None,
) -> Chip8:
    """Load a ROM and run it for a fixed number of frames.

    Each frame runs `steps_per_frame` instructions and one timer tick.
    Prints the final display to stdout and a summary to stderr.

    Args:
        path: Path to the ROM file.
        frames: Number of frames to run.
        steps_per_frame: Instructions executed per frame.
        seed: Optional seed for the RND instruction's generator.
        keys: Hex keys held down for the whole run.

    Returns:
        The VM after the run.

    Raises:
        Chip8FatalError: If the program faults. The display reached so far
            is printed first.
    """
    vm = Chip8(rng=random.Random(seed))
    size = load_rom_file(vm, path)
    print(f"Loaded {size} bytes from {path} at 0x{PROGRAM_START:03X}", file=sys.stderr)

    held = [False] * NUM_KEYS
    for key in keys or []:
        held[key] = True
    vm.set_keys(held)

    try:
        for _ in range(frames):
            vm.run_frame(steps_per_frame)
    except Chip8FatalError:
        print(format_display_ascii(vm.get_display()))
        print(f"Halted after {vm.cycle_count} cycles at 0x{vm.pc:03X}.", file=sys.stderr)
        raise

    print(format_display_ascii(vm.get_display()))
    state = "awaiting key" if vm.awaiting_key else "running"
    print(f"Ran {vm.cycle_count} cycles over {frames} frames ({state}).", file=sys.stderr)
    print(f"  PC = 0x{vm.pc:03X}  I = 0x{vm.index:03X}", file=sys.stderr)
    return vm


def disassemble_file(path: str) -> None:
    """Print one line per instruction word of a ROM."""
    data = read_rom(path)
    for line in disassemble_rom(data, PROGRAM_START):
        print(f"0x{line.addr:03X}: {line.word:04X}  {line.text}")
