"""Sugerencia de hoja y formato de fecha (solo orientativa).

No se usa para extraer: el usuario puede ignorarla. La hoja más probable es la
que contiene más encabezados de empleado ("ID :").
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .config import AppConfig
from .core import es_encabezado
from .logger import log_exception

logger = logging.getLogger("extractor_asistencia")

FORMATO_FECHA = "D-MMM-YYYY"


@dataclass(frozen=True)
class Sugerencia:
    hojas: List[str] = field(default_factory=list)
    formato_fecha: str = FORMATO_FECHA
    encabezados_por_hoja: Dict[str, int] = field(default_factory=dict)

    @property
    def hoja(self) -> str:
        return self.hojas[0] if self.hojas else ""


def _contar_encabezados(df: pd.DataFrame, cfg: AppConfig) -> int:
    n = 0
    for valores in df.itertuples(index=False, name=None):
        if es_encabezado(valores, cfg):
            n += 1
    return n


def sugerir_metadatos(path: Path, cfg: AppConfig | None = None) -> Sugerencia:
    """Ordena las hojas por número de encabezados "ID :" (desc), luego por orden del libro.

    Una hoja ilegible cuenta como 0 encabezados; nunca lanza por eso.
    """
    cfg = cfg or AppConfig()
    conteo: Dict[str, int] = {}
    with pd.ExcelFile(Path(path)) as xls:
        nombres = [str(s) for s in xls.sheet_names]
        for nombre in nombres:
            try:
                df = pd.read_excel(xls, sheet_name=nombre, header=None, dtype=object)
            except Exception:
                log_exception("No se pudo leer la hoja para sugerencia", extra={"hoja": nombre}, level=logging.DEBUG)
                conteo[nombre] = 0
                continue
            conteo[nombre] = _contar_encabezados(df, cfg)

    orden = sorted(range(len(nombres)), key=lambda i: (-conteo[nombres[i]], i))
    hojas = [nombres[i] for i in orden]
    logger.debug("Sugerencia de hojas: %s", conteo)
    return Sugerencia(hojas=hojas, formato_fecha=FORMATO_FECHA, encabezados_por_hoja=conteo)
