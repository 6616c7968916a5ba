"""TUI instruction statistics panel: formats per-instruction execution counts."""

from __future__ import annotations


# Instruction category definitions for grouping.
# Each set contains the mnemonics belonging to that category.
_FLOW_MNEMONICS: set[str] = {
    "JP", "CALL", "RET", "JP_V0",
    "SE_VX_BYTE", "SNE_VX_BYTE", "SE_VX_VY", "SNE_VX_VY",
}

_ALU_MNEMONICS: set[str] = {
    "LD_VX_BYTE", "ADD_VX_BYTE", "LD_VX_VY", "OR", "AND", "XOR",
    "ADD_VX_VY", "SUB", "SHR", "SUBN", "SHL", "RND",
}

_MEMORY_MNEMONICS: set[str] = {
    "LD_I", "ADD_I_VX", "LD_F_VX", "LD_B_VX", "LD_MEM_VX", "LD_VX_MEM",
}

_DISPLAY_MNEMONICS: set[str] = {"CLS", "DRW"}

_IO_MNEMONICS: set[str] = {
    "SKP", "SKNP", "LD_VX_K", "LD_VX_DT", "LD_DT_VX", "LD_ST_VX",
}

# Category definitions: (label, mnemonic set)
_CATEGORIES: list[tuple[str, set[str]]] = [
    ("Flow", _FLOW_MNEMONICS),
    ("ALU", _ALU_MNEMONICS),
    ("Memory", _MEMORY_MNEMONICS),
    ("Display", _DISPLAY_MNEMONICS),
    ("Keys/Timers", _IO_MNEMONICS),
]


def _categorize(mnemonic: str) -> str:
    """Return the category label for a mnemonic, or "Other" if not found."""
    for label, mnemonics in _CATEGORIES:
        if mnemonic in mnemonics:
            return label
    return "Other"


def format_instruction_stats(stats: dict[str, int], top_n: int = 8) -> str:
    """Format instruction execution statistics for display in a Rich panel.

    The first line gives the total and the number of distinct
    instructions. The most frequent `top_n` follow, four per line, with
    their share of the total, and the last line gives category totals.

    Args:
        stats: Dict mapping instruction mnemonic to execution count.
        top_n: Maximum number of individual instructions to show.

    Returns:
        A multi-line string suitable for display.
    """
    if not stats:
        return "No instructions executed."

    total = sum(stats.values())
    ranked = sorted(stats.items(), key=lambda item: (-item[1], item[0]))
    cells = [f"{name:<11} {count / total:6.1%}" for name, count in ranked[:top_n]]

    lines = [f"{total:,} instructions, {len(stats)} distinct"]
    for start in range(0, len(cells), 4):
        lines.append("  " + "   ".join(cells[start:start + 4]))

    cat_totals: dict[str, int] = {}
    for name, count in stats.items():
        cat = _categorize(name)
        cat_totals[cat] = cat_totals.get(cat, 0) + count

    labels = [label for label, _ in _CATEGORIES] + ["Other"]
    lines.append("")
    lines.append("  " + "  |  ".join(
        f"{cat}: {cat_totals[cat]:,} ({cat_totals[cat] / total:.0%})"
        for cat in labels if cat in cat_totals
    ))
    return "\n".join(lines)
