"""CLI del extractor de asistencia.

Subcomandos:
- process: extrae los registros de una hoja y exporta CSV/HTML/XLSX
- sheets: lista las hojas del libro
- suggest: sugiere hoja y formato de fecha (orientativo)
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import FORMATOS_VALIDOS, AppConfig, cargar_config
from .io import HojaNoEncontradaError, listar_hojas
from .logger import setup_logging
from .pipeline import procesar_archivo
from .sugerencias import sugerir_metadatos
from .validaciones import parse_dias


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Extractor de asistencia (reporte de reloj checador).")
    sub = p.add_subparsers(dest="cmd")

    # ---- process ----
    p_proc = sub.add_parser("process", help="Extraer registros de una hoja.")
    p_proc.add_argument("--input", "--in", dest="input_path", required=True, help="Archivo Excel (.xlsx) de entrada.")
    p_proc.add_argument("--sheet", dest="sheet_name", default="", help="Nombre de la hoja (default: la sugerida).")
    p_proc.add_argument("--days", dest="days", required=True, help='Días separados por comas, ej. "22, 23, 24".')
    p_proc.add_argument("--month", dest="month", required=True, help="Abreviatura del mes, ej. Jul.")
    p_proc.add_argument("--year", dest="year", type=int, required=True, help="Año, ej. 2025.")
    p_proc.add_argument("--format", dest="formats", action="append", choices=FORMATOS_VALIDOS, help="Formato de salida (repetible). Default: config.")
    p_proc.add_argument("--out-dir", dest="out_dir", default="", help="Directorio de salida (default: junto al archivo de entrada).")
    p_proc.add_argument("--config-dir", dest="config_dir", default="", help="Directorio con extractor_config.json (opcional).")
    p_proc.add_argument("--dry-run", dest="dry_run", action="store_true", help="Extrae y muestra el conteo sin escribir archivos.")
    p_proc.add_argument("--log-level", dest="log_level", default="INFO", help="DEBUG/INFO/WARNING/ERROR.")

    # ---- sheets ----
    p_sh = sub.add_parser("sheets", help="Listar hojas del libro.")
    p_sh.add_argument("--input", "--in", dest="input_path", required=True, help="Archivo Excel (.xlsx).")
    p_sh.add_argument("--log-level", dest="log_level", default="INFO", help="DEBUG/INFO/WARNING/ERROR.")

    # ---- suggest ----
    p_sug = sub.add_parser("suggest", help="Sugerir hoja y formato de fecha.")
    p_sug.add_argument("--input", "--in", dest="input_path", required=True, help="Archivo Excel (.xlsx).")
    p_sug.add_argument("--log-level", dest="log_level", default="INFO", help="DEBUG/INFO/WARNING/ERROR.")

    return p


def _check_input(path: Path) -> str:
    """Mensaje de error si la ruta no es un archivo existente; '' si está bien."""
    if not path.exists():
        return f"ERROR: archivo de entrada no existe: {path}"
    if path.is_dir():
        return f"ERROR: se esperaba un archivo, no un directorio: {path}"
    return ""


def _cmd_process(args: argparse.Namespace) -> int:
    setup_logging(level=str(args.log_level).upper())

    in_path = Path(args.input_path)
    err = _check_input(in_path)
    if err:
        print(err)
        return 2

    cfg = cargar_config(Path(args.config_dir)) if str(getattr(args, "config_dir", "")).strip() else AppConfig()

    try:
        dias = parse_dias(args.days)
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2

    sheet = str(getattr(args, "sheet_name", "") or "").strip()
    if not sheet:
        try:
            sheet = sugerir_metadatos(in_path, cfg).hoja
        except (TypeError, ValueError) as e:
            # no es un libro de Excel legible
            print(f"ERROR: {e}")
            return 2
        print(f"Hoja sugerida: {sheet}")

    try:
        res = procesar_archivo(
            in_path,
            sheet,
            dias,
            str(args.month),
            int(args.year),
            cfg=cfg,
            formatos=args.formats or None,
            out_dir=Path(args.out_dir) if str(getattr(args, "out_dir", "")).strip() else None,
            dry_run=bool(getattr(args, "dry_run", False)),
        )
    except (HojaNoEncontradaError, TypeError, ValueError) as e:
        # hoja inexistente o parámetros inválidos: error del usuario, sin reintento
        print(f"ERROR: {e}")
        return 2

    if res.vacio:
        print("No se encontraron registros coincidentes. Revisa tu configuración.")
        return 0
    print(f"OK: se extrajeron {len(res.registros)} registros.")
    for fmt, out in res.salidas.items():
        print(f"  {fmt}: {out}")
    return 0


def _cmd_sheets(args: argparse.Namespace) -> int:
    setup_logging(level=str(args.log_level).upper())
    in_path = Path(args.input_path)
    err = _check_input(in_path)
    if err:
        print(err)
        return 2
    try:
        hojas = listar_hojas(in_path)
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2
    for name in hojas:
        print(name)
    return 0


def _cmd_suggest(args: argparse.Namespace) -> int:
    setup_logging(level=str(args.log_level).upper())
    in_path = Path(args.input_path)
    err = _check_input(in_path)
    if err:
        print(err)
        return 2
    try:
        sug = sugerir_metadatos(in_path)
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2
    print(f"Hoja sugerida: {sug.hoja}")
    print(f"Formato de fecha: {sug.formato_fecha}")
    for name in sug.hojas:
        print(f"  {name}: {sug.encabezados_por_hoja.get(name, 0)} encabezados")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "process":
        return _cmd_process(args)
    if args.cmd == "sheets":
        return _cmd_sheets(args)
    if args.cmd == "suggest":
        return _cmd_suggest(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
