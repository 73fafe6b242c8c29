"""Pipeline: libro -> grid -> registros -> archivos de salida."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import FORMATOS_VALIDOS, AppConfig
from .core import extraer_registros
from .grid import normalizar_grid
from .io import exportar_csv, exportar_excel, exportar_html, leer_grid
from .utils import sanitize_filename
from .validaciones import validate_month_label, validate_non_empty_string, validate_year

logger = logging.getLogger("extractor_asistencia")

_EXTENSIONES = {"csv": ".csv", "html": ".html", "xlsx": ".xlsx"}


@dataclass
class ResultadoProceso:
    registros: List[Dict[str, object]]
    salidas: Dict[str, Path] = field(default_factory=dict)

    @property
    def vacio(self) -> bool:
        return not self.registros


def _validar_formatos(formatos: Sequence[str]) -> List[str]:
    out: List[str] = []
    for f in formatos:
        f = str(f).strip().lower()
        if f not in FORMATOS_VALIDOS:
            raise ValueError(f"Formato de salida no soportado: {f!r} (válidos: {', '.join(FORMATOS_VALIDOS)}).")
        if f not in out:
            out.append(f)
    return out


def procesar_archivo(
    input_path: Path,
    sheet_name: str,
    dias: Sequence[str],
    mes: str,
    anio: int,
    *,
    cfg: Optional[AppConfig] = None,
    formatos: Optional[Sequence[str]] = None,
    out_dir: Optional[Path] = None,
    dry_run: bool = False,
) -> ResultadoProceso:
    """Procesa una hoja del reporte del reloj checador.

    Raises:
        HojaNoEncontradaError: la hoja no existe (no se extrae nada).
        ValueError / TypeError: parámetros inválidos (mes, año, días, formatos).
    """
    cfg = cfg or AppConfig()
    input_path = Path(input_path)
    sheet_name = validate_non_empty_string(sheet_name)
    mes = validate_month_label(mes)
    anio = validate_year(anio)
    dias = [str(d).strip() for d in dias if str(d).strip()]
    if not dias:
        raise ValueError("Se requiere al menos un día.")
    formatos = _validar_formatos(cfg.formatos_salida if formatos is None else formatos)

    logger.info("Procesando %s (hoja=%r, mes=%s, año=%d, días=%d)", input_path.name, sheet_name, mes, anio, len(dias))
    grid = normalizar_grid(leer_grid(input_path, sheet_name))
    registros = extraer_registros(grid, dias, mes, anio, cfg)
    resultado = ResultadoProceso(registros=registros)

    if not registros:
        logger.warning("No se encontraron registros coincidentes en la hoja %r. Revisa la configuración.", sheet_name)
        return resultado
    if dry_run:
        logger.info("dry-run: no se escriben archivos (%d registros)", len(registros))
        return resultado

    destino = Path(out_dir) if out_dir else input_path.parent
    base = sanitize_filename(cfg.nombre_salida) or "RegistroAsistenciaDepurado"
    for fmt in formatos:
        out_path = destino / f"{base}{_EXTENSIONES[fmt]}"
        if fmt == "csv":
            exportar_csv(registros, out_path)
        elif fmt == "html":
            exportar_html(registros, out_path, titulo=cfg.titulo_html, umbral=cfg.umbral_horas)
        else:
            exportar_excel(registros, out_path, cfg=cfg)
        resultado.salidas[fmt] = out_path
        logger.info("Salida %s -> %s", fmt, out_path)
    return resultado
