"""
Improvement reports for the vanity search.

Each time the coordinator accepts a candidate it logs a block like::

    ----
    Score:            3 (leading-zero-bytes)
    Worker:           5
    Elapsed:          0:41:07
    Next improvement: ~7d 7:22:00
    Address:          0x000000a3...
    Seed Phrase:      ...
    ----
"""

from __future__ import annotations

from typing import Optional


def estimate_next_improvement(time_to_find: float, difficulty_base: int) -> Optional[float]:
    """
    Expected seconds until the next strict improvement.

    Reaching the current score took *time_to_find* seconds; one more
    point of score multiplies the search space by *difficulty_base*.
    Returns None when there is no time to scale yet.
    """
    if time_to_find <= 0:
        return None
    return time_to_find * difficulty_base


def format_duration(seconds: float) -> str:
    """``H:MM:SS``, with a ``Nd`` prefix past one day."""
    total = int(round(max(seconds, 0.0)))
    days, rem = divmod(total, 86_400)
    hours, rem = divmod(rem, 3_600)
    minutes, secs = divmod(rem, 60)
    clock = f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{days}d {clock}" if days else clock


def format_report(
    *,
    score: int,
    rule_name: str,
    address: str,
    phrase: str,
    elapsed: float,
    next_improvement: Optional[float],
    worker_id: Optional[int] = None,
) -> str:
    """Render one improvement event; *address* is already checksum-cased."""
    eta = "unknown" if next_improvement is None else f"~{format_duration(next_improvement)}"
    lines = [
        "----",
        f"Score:            {score} ({rule_name})",
    ]
    if worker_id is not None:
        lines.append(f"Worker:           {worker_id}")
    lines += [
        f"Elapsed:          {format_duration(elapsed)}",
        f"Next improvement: {eta}",
        f"Address:          0x{address}",
        f"Seed Phrase:      {phrase}",
        "----",
    ]
    return "\n".join(lines)
