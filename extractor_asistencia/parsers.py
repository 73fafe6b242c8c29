"""Parsers de checadas y cálculo de horas por día.

Este módulo es la **fuente de verdad** para interpretar la celda de checadas
que el reloj exporta por día (p.ej. ``"08:02\\n17:45"``).

Principios:
- Nunca lanza por datos sucios: degrada a los centinelas
  ``NO_HAY_REGISTRO`` / ``REGISTRO_INCOMPLETO``.
- Primera línea = entrada, última línea = salida; las intermedias se ignoran.
- Sin soporte de turnos nocturnos: salida <= entrada es registro incompleto.
"""

from __future__ import annotations

import re
from datetime import datetime, time
from typing import List, Optional, Union

from .utils import round2


__all__ = [
    "NO_HAY_REGISTRO",
    "REGISTRO_INCOMPLETO",
    "CENTINELAS",
    "parse_time",
    "segmentos_checada",
    "calcular_horas",
    "es_centinela",
]

NO_HAY_REGISTRO = "NO HAY REGISTRO"
REGISTRO_INCOMPLETO = "REGISTRO INCOMPLETO"
CENTINELAS = (NO_HAY_REGISTRO, REGISTRO_INCOMPLETO)

Horas = Union[float, str]

_TIME_RE = re.compile(r"(?P<h>\d{1,2}):(?P<m>\d{2})")


def parse_time(value: object) -> Optional[time]:
    """Parsea la primera hora ``H:MM``/``HH:MM`` que aparezca en el texto.

    Args:
        value: String con una checada (p.ej. "08:05", "Entrada 8:05").

    Returns:
        `time` con segundos a 0, o `None` si no hay match o está fuera de rango.
    """
    if not isinstance(value, str):
        return None
    m = _TIME_RE.search(value)
    if not m:
        return None
    h = int(m.group("h"))
    mi = int(m.group("m"))
    if not (0 <= h <= 23 and 0 <= mi <= 59):
        return None
    return time(hour=h, minute=mi)


def segmentos_checada(value: object) -> List[str]:
    """Líneas no vacías (ya recortadas) de una celda de checadas."""
    if not isinstance(value, str):
        return []
    return [seg.strip() for seg in value.split("\n") if seg.strip()]


def calcular_horas(value: object) -> Horas:
    """Horas trabajadas en el día, o un centinela.

    Una hora fuera de rango (24:00, 12:60) cuenta como línea sin hora: REGISTRO INCOMPLETO.

    >>> calcular_horas("08:00\\n16:00")
    8.0
    >>> calcular_horas("08:00")
    'REGISTRO INCOMPLETO'
    >>> calcular_horas(None)
    'NO HAY REGISTRO'
    """
    if not isinstance(value, str) or not value.strip():
        return NO_HAY_REGISTRO

    segmentos = segmentos_checada(value)
    if not segmentos:
        return NO_HAY_REGISTRO
    if len(segmentos) == 1:
        return REGISTRO_INCOMPLETO

    entrada = parse_time(segmentos[0])
    salida = parse_time(segmentos[-1])
    if entrada is None or salida is None:
        return REGISTRO_INCOMPLETO

    # Mismo día; no hay cruce de medianoche.
    hoy = datetime(2000, 1, 1)
    dt_ent = datetime.combine(hoy, entrada)
    dt_sal = datetime.combine(hoy, salida)
    if dt_sal <= dt_ent:
        return REGISTRO_INCOMPLETO

    return round2((dt_sal - dt_ent).total_seconds() / 3600)


def es_centinela(value: object) -> bool:
    return isinstance(value, str) and value in CENTINELAS
