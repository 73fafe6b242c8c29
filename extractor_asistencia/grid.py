"""Limpieza del grid crudo de celdas (filas/columnas vacías)."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .utils import is_nan

__all__ = ["Celda", "Fila", "Grid", "celda_vacia", "celda_en", "normalizar_grid", "buscar_marcador"]

Celda = Any
Fila = List[Celda]
Grid = List[Fila]


def celda_vacia(v: Celda) -> bool:
    """None, "" y NaN cuentan como celda sin valor."""
    return v is None or (isinstance(v, str) and v == "") or is_nan(v)


def celda_en(fila: Sequence[Celda], idx: int) -> Celda:
    """Celda en `idx`, o None si la fila es más corta (filas irregulares)."""
    if idx < 0 or idx >= len(fila):
        return None
    return fila[idx]


def normalizar_grid(grid: Sequence[Sequence[Celda]]) -> Grid:
    """Quita filas vacías y columnas vacías en todas las filas.

    - Una fila sobrevive si tiene al menos una celda con valor.
    - Una columna se elimina si está vacía en todas las filas que sobrevivieron.
    - No altera valores ni reordena filas/columnas; no muta la entrada.
    """
    filas = [list(row) for row in grid if any(not celda_vacia(c) for c in row)]
    if not filas:
        return []

    n_cols = max(len(row) for row in filas)
    keep = [j for j in range(n_cols) if any(not celda_vacia(celda_en(row, j)) for row in filas)]
    if len(keep) == n_cols:
        return filas

    # Las columnas conservadas que caen fuera de una fila corta no se rellenan.
    return [[row[j] for j in keep if j < len(row)] for row in filas]


def buscar_marcador(fila: Sequence[Celda], marcador: str) -> Optional[int]:
    """Índice de la primera celda de texto que contiene `marcador`, o None."""
    for idx, v in enumerate(fila):
        if isinstance(v, str) and marcador in v:
            return idx
    return None
