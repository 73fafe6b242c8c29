"""
Helpers compartidos (celdas, nombres de archivo, backups, permisos).
"""
from __future__ import annotations

import math
import os
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional


def is_nan(v: object) -> bool:
    """True para NaN de pandas/numpy (float) sin importar numpy."""
    return isinstance(v, float) and math.isnan(v)


def round2(value: float) -> float:
    """Redondea a 2 decimales, mitades hacia arriba (0.125 -> 0.13)."""
    return math.floor(value * 100 + 0.5) / 100


def fmt_numero(v: object) -> str:
    """Formatea un número para texto: 8.0 -> '8', 7.75 -> '7.75'."""
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._\- ]+")

def sanitize_filename(name: str, max_len: int = 120) -> str:
    """
    Produce un componente de nombre de archivo seguro.
    Evita path traversal y elimina caracteres problemáticos.
    """
    name = (name or "").strip().replace("\\", "_").replace("/", "_")
    name = SAFE_NAME_RE.sub("_", name)
    name = re.sub(r"\s+", " ", name).strip()
    return name[:max_len] if len(name) > max_len else name


def backup_file(path: Path, *, suffix: str = ".bak") -> Optional[Path]:
    """
    Crea un backup con timestamp antes de sobrescribir.
    Retorna la ruta del backup si se creó.
    """
    path = Path(path)
    if not path.exists():
        return None
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    bak = path.with_suffix(path.suffix + f"{suffix}_{ts}")
    shutil.copy2(path, bak)
    return bak


def chmod_restringido(path: Path) -> None:
    """Intenta restringir permisos del archivo (POSIX).

    - Archivos: 600
    - Carpetas: 700

    En Windows no hace nada (sin romper).
    """
    path = Path(path)
    if os.name != "posix":
        return
    try:
        if path.is_dir():
            path.chmod(0o700)
        elif path.exists():
            path.chmod(0o600)
    except OSError:
        # No fallar por permisos
        return
