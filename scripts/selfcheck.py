"""Self-check for the attendance extractor.

Runs:
- compileall
- pytest
- CLI smoke run (sheets, suggest, process) on a demo clock report written to a temp dir

Exit code:
- 0 on success
- non-zero on failure

Usage:
    python scripts/selfcheck.py
"""

from __future__ import annotations

import subprocess
import sys
import tempfile
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]

# Dos empleados, columnas vacías intercaladas como en el reporte real del reloj.
DEMO_ROWS = [
    ["Reporte de Asistencia", None, None, None, None, None, None, None, None, None],
    ["ID :", None, "x", "E001", None, "Nombre :", "Jane Doe", "Dept. :", "x", "Sales"],
    ["08:00\n16:00", None, "08:00\n15:30", "08:10", None, None, None, None, None, None],
    ["ID :", None, "x", "E002", None, "Nombre :", "John Roe", "Dept. :", "x", "Ops"],
    ["07:55\n17:05", None, None, "09:00\n16:00", None, None, None, None, None, None],
]


def write_demo(path: Path) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([["Portada"]]).to_excel(writer, sheet_name="Portada", header=False, index=False)
        pd.DataFrame(DEMO_ROWS).to_excel(writer, sheet_name="Asistencia", header=False, index=False)
    return path


def run(cmd: list[str]) -> None:
    print("\n$", " ".join(cmd))
    subprocess.run(cmd, cwd=str(ROOT), check=True)


def cli(*args: str) -> list[str]:
    return [sys.executable, "-m", "extractor_asistencia.cli", *args]


def main() -> int:
    try:
        run([sys.executable, "-m", "compileall", "-q", "extractor_asistencia", "tests", "scripts"])
        run([sys.executable, "-m", "pytest", "-q"])

        with tempfile.TemporaryDirectory(prefix="extractor_selfcheck_") as tmp:
            demo = write_demo(Path(tmp) / "demo_input.xlsx")
            run(cli("sheets", "--input", str(demo)))
            run(cli("suggest", "--input", str(demo)))
            run(cli("process", "--input", str(demo), "--days", "1,2,3", "--month", "Jul", "--year", "2025", "--dry-run"))
            run(
                cli(
                    "process", "--input", str(demo), "--sheet", "Asistencia",
                    "--days", "1,2,3", "--month", "Jul", "--year", "2025",
                    "--format", "csv", "--format", "html", "--format", "xlsx",
                )
            )
            salidas = sorted(p.name for p in Path(tmp).glob("RegistroAsistenciaDepurado.*"))
            if len(salidas) != 3:
                print(f"\n[FAIL] expected 3 exported files, got {salidas}")
                return 1
        print("\n[OK] selfcheck passed")
        return 0
    except subprocess.CalledProcessError as e:
        print(f"\n[FAIL] selfcheck failed: {e}")
        return int(e.returncode or 1)


if __name__ == "__main__":
    raise SystemExit(main())
