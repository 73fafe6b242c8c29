"""Funciones de validación de entrada para el extractor de asistencia."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional


_DIAS_RE = re.compile(r"^\s*(\d+\s*,\s*)*\d+\s*,?\s*$")


def validate_input(value: object, expected_type: type | tuple[type, ...]) -> object:
    """Validate input value against the expected type."""
    if not isinstance(value, expected_type):
        if isinstance(expected_type, tuple):
            names = ", ".join(t.__name__ for t in expected_type)
        else:
            names = expected_type.__name__
        raise TypeError(
            f"Expected value of type {names}, but got {type(value).__name__}."
        )
    return value


def validate_non_empty_string(value: object) -> str:
    """Validate that the string is not empty."""
    validate_input(value, str)
    s = str(value).strip()
    if not s:
        raise ValueError("String cannot be empty or just whitespace.")
    return s


def validate_range(value: int | float, min_value: int | float, max_value: int | float) -> int | float:
    """Validate that the value is within the specified range."""
    validate_input(value, (int, float))
    if not (min_value <= value <= max_value):
        raise ValueError(f"Value {value} must be between {min_value} and {max_value}.")
    return value


def validate_non_negative_int(value: object, name: str = "value") -> int:
    """Validate that the value is a non-negative integer (>= 0)."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name}: expected int, got {type(value).__name__}.")
    if value < 0:
        raise ValueError(f"{name}: must be >= 0, got {value}.")
    return value


def parse_dias(value: object) -> List[str]:
    """Convierte "22, 23, 24" en ["22", "23", "24"].

    Solo se aceptan enteros separados por comas; los elementos vacíos
    (p.ej. una coma final) se descartan.
    """
    s = validate_non_empty_string(value)
    if not _DIAS_RE.match(s):
        raise ValueError(f"Los días deben ser números separados por comas (ej. 22, 23, 24), se recibió {s!r}.")
    return [d.strip() for d in s.split(",") if d.strip()]


def validate_year(value: object, today: Optional[date] = None) -> int:
    """Año entre 1900 y el año actual + 1."""
    validate_non_negative_int(value, "year")
    today = today or date.today()
    max_year = today.year + 1
    if not (1900 <= int(value) <= max_year):  # type: ignore[arg-type]  # validated above
        raise ValueError(f"year: must be between 1900 and {max_year}, got {value}.")
    return int(value)  # type: ignore[arg-type]


def validate_month_label(value: object) -> str:
    """Abreviatura de mes de 3 o 4 letras (ej. "Jul", "Sept")."""
    s = validate_non_empty_string(value)
    if not (3 <= len(s) <= 4):
        raise ValueError(f"month: expected a 3-4 letter abbreviation, got {s!r}.")
    return s
