"""I/O: lectura del libro (grid crudo) y exportación CSV / HTML / XLSX."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .config import AppConfig
from .core import COL_CUMPLIDOS, COL_INCUMPLIDOS
from .grid import Grid
from .logger import log_exception
from .parsers import NO_HAY_REGISTRO, REGISTRO_INCOMPLETO
from .utils import chmod_restringido, fmt_numero, is_nan

logger = logging.getLogger("extractor_asistencia")

Registros = Sequence[Dict[str, object]]


class HojaNoEncontradaError(KeyError):
    """La hoja pedida no existe en el libro."""

    def __init__(self, hoja: str, disponibles: Sequence[str]):
        self.hoja = hoja
        self.disponibles = list(disponibles)
        super().__init__(hoja)

    def __str__(self) -> str:
        return f'Sheet "{self.hoja}" not found. Available sheets: {", ".join(self.disponibles)}'


# ---------------------------
# Lectura
# ---------------------------

def listar_hojas(path: Path) -> List[str]:
    with pd.ExcelFile(path) as xls:
        return [str(s) for s in xls.sheet_names]


def _fila_desde_valores(valores: Sequence[object]) -> List[object]:
    fila = [None if is_nan(v) else v for v in valores]
    # Filas irregulares: sin celdas vacías al final
    while fila and (fila[-1] is None or fila[-1] == ""):
        fila.pop()
    return fila


def leer_grid(path: Path, sheet_name: str) -> Grid:
    """Lee una hoja como lista de filas de valores crudos (sin encabezado).

    - Celdas vacías -> None.
    - Filas completamente vacías se suprimen.

    Raises:
        HojaNoEncontradaError: si `sheet_name` no existe; el mensaje lista las hojas disponibles.
    """
    path = Path(path)
    with pd.ExcelFile(path) as xls:
        hojas = [str(s) for s in xls.sheet_names]
        if sheet_name not in hojas:
            raise HojaNoEncontradaError(sheet_name, hojas)
        df = pd.read_excel(xls, sheet_name=sheet_name, header=None, dtype=object)

    grid: Grid = []
    for valores in df.itertuples(index=False, name=None):
        fila = _fila_desde_valores(valores)
        if fila:
            grid.append(fila)
    logger.debug("Hoja %r: %d filas con datos", sheet_name, len(grid))
    return grid


# ---------------------------
# Reglas de presentación
# ---------------------------

CLASE_CUMPLIDOS = "dias-cumplidos"
CLASE_INCUMPLIDOS = "dias-incumplidos"
CLASE_NO_REGISTRO = "no-registro"
CLASE_INCOMPLETO = "registro-incompleto"
CLASE_INSUFICIENTES = "horas-insuficientes"
CLASE_NORMALES = "horas-normales"


def estilo_celda(header: str, value: object, umbral: float = 7.75) -> str:
    """Clase de estilo de una celda (compartida por HTML y XLSX).

    Primero por columna (resumen de días), luego por valor.
    """
    if header == COL_CUMPLIDOS:
        return CLASE_CUMPLIDOS
    if header == COL_INCUMPLIDOS:
        return CLASE_INCUMPLIDOS
    if isinstance(value, str):
        if value == NO_HAY_REGISTRO:
            return CLASE_NO_REGISTRO
        if value == REGISTRO_INCOMPLETO:
            return CLASE_INCOMPLETO
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return CLASE_INSUFICIENTES if value < umbral else CLASE_NORMALES
    return ""


def _texto(v: object) -> str:
    if v is None or is_nan(v):
        return ""
    if isinstance(v, (int, float)):
        return fmt_numero(v)
    return str(v)


def _headers(registros: Registros) -> List[str]:
    return list(registros[0].keys())


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def _harden(out_path: Path) -> None:
    try:
        chmod_restringido(out_path)
    except Exception:
        log_exception("No se pudo endurecer permisos del archivo de salida", level=logging.DEBUG)


# ---------------------------
# CSV
# ---------------------------

def _texto_csv(v: object) -> str:
    # El escritor solo entrecomilla por "\n" (lineterminator); "\r" se normaliza a "\n".
    return _texto(v).replace("\r\n", "\n").replace("\r", "\n")


def exportar_csv(registros: Registros, out_path: Path) -> Optional[Path]:
    """CSV con BOM (utf-8-sig) para abrir directo en Excel.

    Campos con coma, comillas o salto de línea van entre comillas (comillas duplicadas).
    Los retornos de carro (\\r, \\r\\n) se escriben como \\n.
    Sin registros no se escribe nada.
    """
    if not registros:
        return None
    out_path = Path(out_path)
    _ensure_dir(out_path.parent)
    headers = _headers(registros)
    rows = [[_texto_csv(r.get(h)) for h in headers] for r in registros]
    df = pd.DataFrame(rows, columns=headers)
    df.to_csv(out_path, index=False, encoding="utf-8-sig", lineterminator="\n")
    _harden(out_path)
    return out_path


# ---------------------------
# HTML
# ---------------------------

_HTML_CSS = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
            background-color: #111827;
            color: #F9FAFB;
            margin: 0;
            padding: 2rem;
        }
        h1 { color: #E5E7EB; text-align: center; margin-bottom: 2rem; }
        table { width: 100%; border-collapse: collapse; background-color: #1F2937; border-radius: 0.5rem; overflow: hidden; }
        th, td { padding: 0.75rem 1rem; text-align: left; border-bottom: 1px solid #374151; }
        thead th { background-color: #374151; color: #E5E7EB; font-weight: 600; text-transform: uppercase; letter-spacing: 0.05em; }
        tbody tr:hover { background-color: #374151; }
        td { color: #D1D5DB; }
        .no-registro, .registro-incompleto {
            font-weight: 600; padding: 0.25rem 0.5rem; border-radius: 9999px; display: inline-block; font-size: 0.75rem;
        }
        .no-registro { background-color: #991B1B; color: #FEE2E2; }
        .registro-incompleto { background-color: #9A3412; color: #FFEDD5; }
        .horas-insuficientes { color: #FB923C; font-weight: 600; }
        .horas-normales { color: #4ADE80; }
        .dias-cumplidos { background-color: rgba(34, 197, 94, 0.15); color: #22C55E; font-weight: 700; }
        .dias-incumplidos { background-color: rgba(239, 68, 68, 0.15); color: #EF4444; font-weight: 700; }
        .check-icon { color: #22C55E; margin-right: 0.25rem; }
        .cross-icon { color: #EF4444; margin-right: 0.25rem; }
"""


def _html_contenido(value: object) -> str:
    """Contenido de celda; checadas multilínea: entrada (✔ verde) y salida (✔ rojo)."""
    s = _texto(value)
    if "\n" in s:
        partes = s.split("\n")
        entrada = html.escape(partes[0])
        salida = html.escape(partes[-1])
        return (
            f'<div><span class="check-icon">&#10004;</span>{entrada}</div>'
            f'<div><span class="cross-icon">&#10004;</span>{salida}</div>'
        )
    return html.escape(s)


def render_html(registros: Registros, titulo: str = "Extracted Attendance Data", umbral: float = 7.75) -> str:
    headers = _headers(registros) if registros else []
    head = "".join(f"<th>{html.escape(h)}</th>" for h in headers)
    filas = []
    for r in registros:
        celdas = []
        for h in headers:
            v = r.get(h)
            clase = estilo_celda(h, v, umbral)
            celdas.append(f'<td class="{clase}">{_html_contenido(v)}</td>')
        filas.append(f"<tr>{''.join(celdas)}</tr>")
    titulo_esc = html.escape(titulo)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="es">\n'
        "<head>\n"
        '<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{titulo_esc}</title>\n"
        f"<style>{_HTML_CSS}</style>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{titulo_esc}</h1>\n"
        "<table>\n"
        f"<thead><tr>{head}</tr></thead>\n"
        f"<tbody>{''.join(filas)}</tbody>\n"
        "</table>\n"
        "</body>\n"
        "</html>\n"
    )


def exportar_html(registros: Registros, out_path: Path, titulo: str = "Extracted Attendance Data", umbral: float = 7.75) -> Optional[Path]:
    """Documento HTML autocontenido con estilos por centinela/umbral."""
    if not registros:
        return None
    out_path = Path(out_path)
    _ensure_dir(out_path.parent)
    out_path.write_text(render_html(registros, titulo=titulo, umbral=umbral), encoding="utf-8")
    _harden(out_path)
    return out_path


# ---------------------------
# XLSX
# ---------------------------

# Protege contra inyección de fórmulas en Excel (Excel/CSV Injection).
# Si un campo de texto comienza con =, +, -, @, Excel puede interpretarlo como fórmula.
_EXCEL_FORMULA_PREFIXES = ("=", "+", "-", "@")

# (relleno, color de fuente, negritas) por clase de estilo
_EXCEL_ESTILOS = {
    CLASE_NO_REGISTRO: ("991B1B", "FEE2E2", True),
    CLASE_INCOMPLETO: ("9A3412", "FFEDD5", True),
    CLASE_INSUFICIENTES: (None, "FB923C", True),
    CLASE_NORMALES: (None, "16A34A", False),
    CLASE_CUMPLIDOS: ("DCFCE7", "15803D", True),
    CLASE_INCUMPLIDOS: ("FEE2E2", "B91C1C", True),
}


def _sanitize_excel_injection(df: pd.DataFrame) -> pd.DataFrame:
    """Retorna una copia del DF con strings sanitizadas para Excel.

    - Solo afecta columnas tipo object/string.
    - No modifica NaN/None ni valores numéricos.
    """
    if df is None or df.empty:
        return df
    out = df.copy()

    def _fix(v):
        if isinstance(v, str) and v.startswith(_EXCEL_FORMULA_PREFIXES):
            return "'" + v
        return v

    for col in out.columns:
        if not (pd.api.types.is_object_dtype(out[col]) or pd.api.types.is_string_dtype(out[col])):
            continue
        out[col] = out[col].map(_fix)
    return out


def exportar_excel(registros: Registros, out_path: Path, cfg: AppConfig | None = None, sheet_name: str = "Asistencia") -> Optional[Path]:
    """Exporta los registros a XLSX.

    Formato aplicado (determinístico / estable):
    - Congela encabezados (freeze panes A2), encabezados en negritas
    - AutoFiltro en el rango usado
    - Ancho de columnas determinístico (por nombre de columna; fallback por longitud de header)
    - Colores por centinela / umbral, igual que el HTML
    """
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    if not registros:
        return None
    cfg = cfg or AppConfig()
    out_path = Path(out_path)
    _ensure_dir(out_path.parent)

    headers = _headers(registros)
    df = pd.DataFrame([[r.get(h) for h in headers] for r in registros], columns=headers, dtype=object)

    def _expected_width(header: object) -> float:
        h = "" if header is None else str(header)
        if h in (cfg.column_widths or {}):
            return float(cfg.column_widths[h])
        for item in (cfg.column_width_patterns or []):
            pat = str(item.get("pattern", ""))
            w = float(item.get("width", 0) or 0)
            if pat and re.search(pat, h):
                return w
        return float(min(45, max(10, len(h) + 2)))

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        _sanitize_excel_injection(df).to_excel(writer, index=False, sheet_name=sheet_name[:31])
        ws = writer.sheets[sheet_name[:31]]

        ws.freeze_panes = "A2"
        header_font = Font(bold=True)
        for c in range(1, ws.max_column + 1):
            ws.cell(row=1, column=c).font = header_font

        try:
            ws.auto_filter.ref = f"A1:{get_column_letter(ws.max_column)}{ws.max_row}"
        except Exception:
            log_exception("No se pudo aplicar auto_filter", level=logging.DEBUG)

        for col_idx, header in enumerate(headers, start=1):
            ws.column_dimensions[get_column_letter(col_idx)].width = _expected_width(header)
            for row_idx, r in enumerate(registros, start=2):
                cell = ws.cell(row=row_idx, column=col_idx)
                v = r.get(header)
                if isinstance(v, str) and "\n" in v:
                    cell.alignment = Alignment(wrap_text=True, vertical="top")
                estilo = _EXCEL_ESTILOS.get(estilo_celda(header, v, cfg.umbral_horas))
                if not estilo:
                    continue
                fill, color, bold = estilo
                cell.font = Font(color=color, bold=bold)
                if fill:
                    cell.fill = PatternFill(start_color=fill, end_color=fill, fill_type="solid")

    _harden(out_path)
    return out_path
