"""Stress test for the per-day hours calculation.

Generates random punch cells (clean, dirty, single-punch, reversed, empty) and
asserts basic invariants of calcular_horas / resumir_horas.

Usage:
    python scripts/stress_calc.py
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

# Ensure project root is on sys.path so "python scripts/..." works.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from extractor_asistencia.core import resumir_horas  # noqa: E402
from extractor_asistencia.parsers import CENTINELAS, calcular_horas  # noqa: E402


def hhmm(mins: int) -> str:
    mins = mins % (24 * 60)
    return f"{mins // 60:02d}:{mins % 60:02d}"


def main() -> int:
    random.seed(1337)
    horas_todas = []

    for _ in range(10_000):
        start = random.randint(0, 23 * 60)
        n = random.randint(0, 5)
        punches = sorted({start + random.randint(0, 16 * 60) for _k in range(n)})
        lines = [hhmm(m) for m in punches]
        if random.random() < 0.2:
            lines = [f"  {ln}  " for ln in lines] + ["", "   "]
        if random.random() < 0.1:
            lines.reverse()
        cell = "\n".join(lines)

        h = calcular_horas(cell)
        horas_todas.append(h)

        # Invariants
        if isinstance(h, float):
            if not (0 < h < 24):
                raise AssertionError(f"hours out of range: {h} for {cell!r}")
            if round(h, 2) != h:
                raise AssertionError(f"hours not rounded to 2 decimals: {h}")
        elif h not in CENTINELAS:
            raise AssertionError(f"unexpected result {h!r} for {cell!r}")
        if len([ln for ln in lines if ln.strip()]) < 2 and not isinstance(h, str):
            raise AssertionError(f"fewer than 2 punches must be a sentinel: {cell!r}")

    res = resumir_horas(horas_todas)
    if res.dias_cumplidos + res.dias_incumplidos > len(horas_todas):
        raise AssertionError("day buckets exceed the number of days")

    print("OK: 10k scenarios passed invariants.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
