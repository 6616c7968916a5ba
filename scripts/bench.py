#!/usr/bin/env python3
"""Emulator performance profiler.

Runs micro-benchmarks of hot-path components and synthetic or ROM
workloads, reporting throughput and instruction mix.

Usage:
    python scripts/bench.py                    # micro-benchmarks + built-in workloads
    python scripts/bench.py --rom game.ch8     # also time a ROM file
    python scripts/bench.py --cprofile count   # cProfile dump of one workload
    python scripts/bench.py --micro-only       # just micro-benchmarks
"""

from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import random
import sys
import time
from pathlib import Path
from typing import Any

# Add project to path so we can import without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from chip8_vm.cpu.cpu import Chip8
from chip8_vm.cpu.decode import decode
from chip8_vm.display.framebuffer import FrameBuffer
from chip8_vm.loader.rom import read_rom
from chip8_vm.memory.font import FONTSET

STEPS_PER_FRAME = 10


def _words(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


# Workloads: (name, program, frames, description)
WORKLOADS: list[tuple[str, bytes, int, str]] = [
    ("count", _words(
        0x6000,  # LD V0, 0
        0x7001,  # ADD V0, 1
        0x1202,  # JP 0x202
    ), 20_000, "Register loop (ADD/JP)"),
    ("alu", _words(
        0x6107,  # LD V1, 7
        0x8014,  # ADD V0, V1
        0x8015,  # SUB V0, V1
        0x8016,  # SHR V0
        0x801E,  # SHL V0
        0x8013,  # XOR V0, V1
        0x1202,  # JP 0x202
    ), 20_000, "8xyN arithmetic mix"),
    ("sprites", _words(
        0x6000,  # LD V0, 0
        0x6100,  # LD V1, 0
        0xA050,  # LD I, 0x050
        0xD015,  # DRW V0, V1, 5
        0x7003,  # ADD V0, 3
        0x7101,  # ADD V1, 1
        0x1206,  # JP 0x206
    ), 10_000, "Sprite drawing (DRW heavy)"),
]


def setup_vm(program: bytes) -> Chip8:
    """Create a seeded VM with a program loaded."""
    vm = Chip8(rng=random.Random(0))
    vm.load_rom(program)
    return vm


def run_frames(vm: Chip8, frames: int) -> None:
    for _ in range(frames):
        vm.run_frame(STEPS_PER_FRAME)


def run_timed(vm: Chip8, frames: int) -> dict[str, Any]:
    """Run the VM and return timing + stats."""
    start = time.perf_counter()
    run_frames(vm, frames)
    elapsed = time.perf_counter() - start

    cycles = vm.cycle_count
    ips = cycles / elapsed if elapsed > 0 else 0

    return {
        "cycles": cycles,
        "elapsed": elapsed,
        "ips": ips,
        "waiting": vm.awaiting_key,
        "stats": dict(vm.instruction_stats),
    }


def run_cprofile(vm: Chip8, frames: int) -> pstats.Stats:
    """Run under cProfile and return stats."""
    pr = cProfile.Profile()
    pr.enable()
    run_frames(vm, frames)
    pr.disable()
    return pstats.Stats(pr)


# ---------------------------------------------------------------------------
# Hot-path micro-benchmarks
# ---------------------------------------------------------------------------

MICRO_N = 500_000


def bench_read16(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark memory.read16() in isolation (the instruction fetch path)."""
    vm = setup_vm(_words(0x1200))
    memory = vm.memory

    start = time.perf_counter()
    for _ in range(n):
        memory.read16(0x200)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_decode(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark instruction decode + Instruction allocation."""
    words = [0x6A2F, 0x8124, 0xD015, 0xF133, 0x2300, 0x00EE]
    nw = len(words)
    start = time.perf_counter()
    for i in range(n):
        decode(words[i % nw])
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_draw_sprite(n: int = MICRO_N // 10) -> dict[str, Any]:
    """Benchmark a 5-row sprite draw with wraparound."""
    fb = FrameBuffer()
    glyph = FONTSET[:5]
    start = time.perf_counter()
    for i in range(n):
        fb.draw_sprite(i % 64, i % 32, glyph)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_step(n: int = 100_000) -> dict[str, Any]:
    """Benchmark a full vm.step() cycle on a tight ADD/JP loop."""
    vm = setup_vm(WORKLOADS[0][1])
    start = time.perf_counter()
    for _ in range(n):
        vm.step()
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def fmt_rate(ips: float) -> str:
    """Format instructions/operations per second."""
    if ips >= 1_000_000:
        return f"{ips / 1_000_000:.2f}M"
    if ips >= 1_000:
        return f"{ips / 1_000:.1f}K"
    return f"{ips:.0f}"


def print_workload_result(name: str, result: dict[str, Any]) -> None:
    """Print results for a workload."""
    status = "awaiting key" if result["waiting"] else "running"
    print(f"  {name:<14} {result['elapsed']:7.3f}s  "
          f"{fmt_rate(result['ips']):>8}/s  "
          f"{result['cycles']:>10,} cycles  ({status})")

    stats = result["stats"]
    total = sum(stats.values())
    if total == 0:
        return
    top5 = sorted(stats.items(), key=lambda x: x[1], reverse=True)[:5]
    parts = [f"{mnemonic} {count / total * 100:.0f}%" for mnemonic, count in top5]
    print(f"  {'':14} mix: {', '.join(parts)}")


def print_micro_result(name: str, result: dict[str, Any]) -> None:
    """Print results for a micro-benchmark."""
    print(f"  {name:<20} {result['elapsed']:7.3f}s  "
          f"{fmt_rate(result['ops_per_sec']):>8}/s  "
          f"({result['ops']:,} ops)")


def print_cprofile_report(stats: pstats.Stats, top_n: int = 25) -> None:
    """Print a cProfile report focused on the hot path."""
    stream = io.StringIO()
    stats.stream = stream
    stats.sort_stats("tottime")
    stats.print_stats(top_n)
    print(stream.getvalue())


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the CHIP-8 emulator")
    parser.add_argument("workload", nargs="?", default=None,
                        help="Run a specific workload (substring match)")
    parser.add_argument("--rom", default=None,
                        help="Also time a ROM file for 2000 frames")
    parser.add_argument("--cprofile", action="store_true",
                        help="Run under cProfile and print hot functions")
    parser.add_argument("--micro-only", action="store_true",
                        help="Only run micro-benchmarks")
    parser.add_argument("--no-micro", action="store_true",
                        help="Skip micro-benchmarks")
    args = parser.parse_args()

    selected = list(WORKLOADS)
    if args.workload:
        selected = [w for w in WORKLOADS if args.workload.lower() in w[0].lower()]
        if not selected:
            print(f"No workload matching '{args.workload}'")
            print(f"Available: {', '.join(n for n, *_ in WORKLOADS)}")
            sys.exit(1)
    if args.rom:
        selected.append((Path(args.rom).name, read_rom(args.rom), 2_000, "ROM file"))

    if not args.no_micro:
        print("Micro-benchmarks (isolated hot-path components)")
        print("-" * 65)
        print_micro_result("memory.read16", bench_read16())
        print_micro_result("decode", bench_decode())
        print_micro_result("draw_sprite", bench_draw_sprite())
        print_micro_result("vm.step (tight loop)", bench_step())
        print()

    if args.micro_only:
        return

    print(f"Workloads ({STEPS_PER_FRAME} steps/frame)")
    print("-" * 65)

    for name, program, frames, desc in selected:
        vm = setup_vm(program)
        if args.cprofile:
            print(f"\ncProfile: {name} ({desc})")
            print("=" * 65)
            print_cprofile_report(run_cprofile(vm, frames))
        else:
            print_workload_result(name, run_timed(vm, frames))
    print()


if __name__ == "__main__":
    main()
