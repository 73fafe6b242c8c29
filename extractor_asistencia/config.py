"""Configuración del extractor (marcadores, umbral de horas, salidas)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .logger import log_exception
from .utils import backup_file, chmod_restringido
from .validaciones import validate_non_negative_int, validate_range

CONFIG_FILENAME = "extractor_config.json"
FORMATOS_VALIDOS = ("csv", "html", "xlsx")


@dataclass
class AppConfig:
    # ---- Reglas ----
    umbral_horas: float = 7.75

    # Marcadores del encabezado de empleado y desplazamiento (en columnas) del valor
    # respecto al marcador. Los offsets se miden sobre el grid ya normalizado.
    # El valor de "Nombre :" está a +1 en el formato actual del reloj checador;
    # versiones anteriores del reporte lo dejaban a +2.
    marcador_id: str = "ID :"
    marcador_nombre: str = "Nombre :"
    marcador_depto: str = "Dept. :"
    offset_id: int = 2
    offset_nombre: int = 1
    offset_depto: int = 2

    # ---- Salidas ----
    nombre_salida: str = "RegistroAsistenciaDepurado"
    formatos_salida: List[str] = field(default_factory=lambda: ["csv", "html"])
    titulo_html: str = "Extracted Attendance Data"

    # Excel export formatting (determinístico / configurable)
    # - column_widths: ancho fijo por nombre de columna (exact match)
    # - column_width_patterns: reglas regex para columnas dinámicas (días)
    column_widths: Dict[str, float] = field(
        default_factory=lambda: {
            "ID": 12,
            "Nombre": 32,
            "Departamento": 22,
            "Horas/Día": 12,
            "Días Cumplidos": 16,
            "Días Incumplidos": 16,
        }
    )
    column_width_patterns: List[Dict[str, object]] = field(
        default_factory=lambda: [
            {"pattern": r"^Horas-", "width": 22},
            {"pattern": r"^[^-]+-[^-]+-\d{4}$", "width": 16},
        ]
    )


def _config_path(config_dir: Path) -> Path:
    return Path(config_dir) / CONFIG_FILENAME


def cargar_config(config_dir: Path) -> AppConfig:
    """Lee extractor_config.json; si no existe lo crea con defaults."""
    path = _config_path(config_dir)
    if not path.exists():
        cfg = AppConfig()
        guardar_config(config_dir, cfg)
        return cfg
    data = json.loads(path.read_text(encoding="utf-8"))
    cfg = AppConfig()

    reglas = data.get("reglas", {}) or {}
    cfg.umbral_horas = float(reglas.get("umbral_horas", cfg.umbral_horas))

    marcadores = data.get("marcadores", {}) or {}
    cfg.marcador_id = str(marcadores.get("id", cfg.marcador_id) or cfg.marcador_id)
    cfg.marcador_nombre = str(marcadores.get("nombre", cfg.marcador_nombre) or cfg.marcador_nombre)
    cfg.marcador_depto = str(marcadores.get("depto", cfg.marcador_depto) or cfg.marcador_depto)
    cfg.offset_id = int(marcadores.get("offset_id", cfg.offset_id))
    cfg.offset_nombre = int(marcadores.get("offset_nombre", cfg.offset_nombre))
    cfg.offset_depto = int(marcadores.get("offset_depto", cfg.offset_depto))

    salidas = data.get("salidas", {}) or {}
    cfg.nombre_salida = str(salidas.get("nombre", cfg.nombre_salida) or cfg.nombre_salida)
    formatos = salidas.get("formatos", cfg.formatos_salida) or cfg.formatos_salida
    cfg.formatos_salida = [str(f).strip().lower() for f in formatos if str(f).strip().lower() in FORMATOS_VALIDOS]
    cfg.titulo_html = str(salidas.get("titulo_html", cfg.titulo_html) or cfg.titulo_html)

    excel = data.get("excel", {}) or {}
    cfg.column_widths = excel.get("column_widths", cfg.column_widths) or cfg.column_widths
    cfg.column_width_patterns = excel.get("column_width_patterns", cfg.column_width_patterns) or cfg.column_width_patterns

    # Validar límites numéricos
    try:
        validate_non_negative_int(cfg.offset_id, "offset_id")
        validate_non_negative_int(cfg.offset_nombre, "offset_nombre")
        validate_non_negative_int(cfg.offset_depto, "offset_depto")
        validate_range(cfg.umbral_horas, 0, 24)
    except (TypeError, ValueError) as exc:
        log_exception(f"Valor inválido en config, usando defaults: {exc}", level=logging.WARNING)
        defaults = AppConfig()
        cfg.offset_id = cfg.offset_id if cfg.offset_id >= 0 else defaults.offset_id
        cfg.offset_nombre = cfg.offset_nombre if cfg.offset_nombre >= 0 else defaults.offset_nombre
        cfg.offset_depto = cfg.offset_depto if cfg.offset_depto >= 0 else defaults.offset_depto
        cfg.umbral_horas = cfg.umbral_horas if 0 <= cfg.umbral_horas <= 24 else defaults.umbral_horas

    return cfg


def guardar_config(config_dir: Path, cfg: AppConfig) -> None:
    """Guarda configuración en extractor_config.json.

    Reglas:
    - No sobrescribe si el contenido serializado no cambió.
    - Si cambia y existe archivo previo, crea backup timestamped.
    - Endurece permisos best-effort (0600 en POSIX).
    """
    path = _config_path(config_dir)

    data = {
        "reglas": {
            "umbral_horas": cfg.umbral_horas,
        },
        "marcadores": {
            "id": cfg.marcador_id,
            "nombre": cfg.marcador_nombre,
            "depto": cfg.marcador_depto,
            "offset_id": cfg.offset_id,
            "offset_nombre": cfg.offset_nombre,
            "offset_depto": cfg.offset_depto,
        },
        "salidas": {
            "nombre": cfg.nombre_salida,
            "formatos": cfg.formatos_salida,
            "titulo_html": cfg.titulo_html,
        },
        "excel": {
            "column_widths": cfg.column_widths,
            "column_width_patterns": cfg.column_width_patterns,
        },
    }

    new_text = json.dumps(data, ensure_ascii=False, indent=2)

    # Si no hay cambios, NO tocar el archivo (ni backups)
    if path.exists() and path.read_text(encoding="utf-8").strip() == new_text.strip():
        return

    try:
        backup_file(path, suffix=".bak")
    except OSError:
        log_exception("Fallo best-effort en backup de config", level=logging.WARNING)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(new_text, encoding="utf-8")
    chmod_restringido(path)

