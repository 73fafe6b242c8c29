"""Núcleo de extracción: bloques de empleado -> registros con horas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .config import AppConfig
from .grid import Celda, buscar_marcador, celda_en, celda_vacia
from .parsers import REGISTRO_INCOMPLETO, calcular_horas
from .utils import round2

__all__ = [
    "BloqueEmpleado",
    "ResumenDias",
    "es_encabezado",
    "campo_por_marcador",
    "detectar_bloques",
    "resumir_horas",
    "construir_registro",
    "extraer_registros",
    "clave_fecha",
    "clave_horas",
    "COL_ID",
    "COL_NOMBRE",
    "COL_DEPTO",
    "COL_PROMEDIO",
    "COL_CUMPLIDOS",
    "COL_INCUMPLIDOS",
]

logger = logging.getLogger("extractor_asistencia")

COL_ID = "ID"
COL_NOMBRE = "Nombre"
COL_DEPTO = "Departamento"
COL_PROMEDIO = "Horas/Día"
COL_CUMPLIDOS = "Días Cumplidos"
COL_INCUMPLIDOS = "Días Incumplidos"


@dataclass(frozen=True)
class BloqueEmpleado:
    """Encabezado de empleado + fila de checadas que le sigue."""
    fila: int
    id: Celda
    nombre: Celda
    departamento: Celda
    checadas: Tuple[Celda, ...] = field(default_factory=tuple)


@dataclass
class ResumenDias:
    total_horas: float = 0.0
    dias_registrados: int = 0
    dias_cumplidos: int = 0
    dias_incumplidos: int = 0

    @property
    def promedio(self) -> float:
        if self.dias_registrados <= 0:
            return 0
        return round2(self.total_horas / self.dias_registrados)


def clave_fecha(dia: str, mes: str, anio: int) -> str:
    return f"{dia}-{mes}-{anio}"


def clave_horas(dia: str) -> str:
    return f"Horas-{dia}"


def es_encabezado(fila: Sequence[Celda], cfg: AppConfig) -> bool:
    return buscar_marcador(fila, cfg.marcador_id) is not None


def campo_por_marcador(fila: Sequence[Celda], marcador: str, offset: int) -> Optional[Celda]:
    """Valor a `offset` columnas del marcador; None si falta el marcador o la celda."""
    idx = buscar_marcador(fila, marcador)
    if idx is None:
        return None
    v = celda_en(fila, idx + offset)
    return None if celda_vacia(v) else v


def detectar_bloques(grid: Sequence[Sequence[Celda]], cfg: AppConfig | None = None) -> Iterator[BloqueEmpleado]:
    """Recorre el grid de arriba hacia abajo y produce un bloque por encabezado.

    Los marcadores se buscan por contenido, no por columna fija: la limpieza de
    columnas vacías desplaza las posiciones entre un reporte y otro.
    Tras un encabezado el cursor avanza 2 filas (encabezado + checadas), aun
    si el encabezado se descarta por no tener ID ni nombre; en otro caso avanza 1.
    """
    cfg = cfg or AppConfig()
    i = 0
    n = len(grid)
    while i < n:
        fila = grid[i]
        if not es_encabezado(fila, cfg):
            i += 1
            continue

        checadas = grid[i + 1] if i + 1 < n else []
        emp_id = campo_por_marcador(fila, cfg.marcador_id, cfg.offset_id)
        nombre = campo_por_marcador(fila, cfg.marcador_nombre, cfg.offset_nombre)
        if emp_id is None and nombre is None:
            logger.debug("Encabezado sin ID ni nombre en fila %d; se omite", i)
        else:
            depto = campo_por_marcador(fila, cfg.marcador_depto, cfg.offset_depto)
            yield BloqueEmpleado(
                fila=i,
                id=emp_id,
                nombre=nombre,
                departamento=depto,
                checadas=tuple(checadas),
            )
        i += 2


def resumir_horas(horas_por_dia: Sequence[object], umbral: float = 7.75) -> ResumenDias:
    """Acumula días cumplidos/incumplidos.

    - Numérico >= umbral: cumplido.
    - Numérico < umbral o REGISTRO INCOMPLETO: incumplido.
    - NO HAY REGISTRO: no cuenta en ninguno.
    """
    res = ResumenDias()
    for h in horas_por_dia:
        if isinstance(h, (int, float)) and not isinstance(h, bool):
            res.total_horas += h
            res.dias_registrados += 1
            if h >= umbral:
                res.dias_cumplidos += 1
            else:
                res.dias_incumplidos += 1
        elif h == REGISTRO_INCOMPLETO:
            res.dias_incumplidos += 1
    return res


def construir_registro(
    bloque: BloqueEmpleado,
    dias: Sequence[str],
    mes: str,
    anio: int,
    cfg: AppConfig | None = None,
) -> Dict[str, object]:
    """Registro plano de un empleado (orden de columnas estable)."""
    cfg = cfg or AppConfig()
    registro: Dict[str, object] = {
        COL_ID: "" if bloque.id is None else bloque.id,
        COL_NOMBRE: "" if bloque.nombre is None else bloque.nombre,
        COL_DEPTO: "" if bloque.departamento is None else bloque.departamento,
    }

    horas_dias: List[object] = []
    for idx, dia in enumerate(dias):
        crudo = celda_en(bloque.checadas, idx)
        horas = calcular_horas(crudo)
        registro[clave_fecha(dia, mes, anio)] = "" if celda_vacia(crudo) else crudo
        registro[clave_horas(dia)] = horas
        horas_dias.append(horas)

    res = resumir_horas(horas_dias, cfg.umbral_horas)
    registro[COL_PROMEDIO] = res.promedio
    registro[COL_CUMPLIDOS] = res.dias_cumplidos
    registro[COL_INCUMPLIDOS] = res.dias_incumplidos
    return registro


def extraer_registros(
    grid: Sequence[Sequence[Celda]],
    dias: Sequence[str],
    mes: str,
    anio: int,
    cfg: AppConfig | None = None,
) -> List[Dict[str, object]]:
    """Un registro por empleado, en el orden en que aparecen en el grid.

    Args:
        grid: Grid ya normalizado (ver `grid.normalizar_grid`).
        dias: Identificadores de día, en orden; definen cuántas celdas de
            checadas se leen por empleado.
        mes: Etiqueta del mes usada en las claves de fecha (ej. "Jul").
        anio: Año usado en las claves de fecha.

    Returns:
        Lista de dicts; vacía si no se reconoce ningún bloque.
    """
    cfg = cfg or AppConfig()
    registros = [construir_registro(b, dias, mes, anio, cfg) for b in detectar_bloques(grid, cfg)]
    logger.info("Registros extraídos: %d (días=%d)", len(registros), len(dias))
    return registros
