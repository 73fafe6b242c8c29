"""
Configuración central de logging del extractor de asistencia.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .utils import chmod_restringido

LOGGER_NAME = "extractor_asistencia"
DEFAULT_FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configura el logging raíz una sola vez.
    - level: DEBUG/INFO/WARNING/ERROR
    - log_file: si se indica, también escribe a archivo (UTF-8)
    """
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # Evita handlers duplicados al re-invocar.
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root.handlers):
        sh = logging.StreamHandler()
        sh.setLevel(lvl)
        sh.setFormatter(logging.Formatter(DEFAULT_FMT))
        root.addHandler(sh)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if not any(getattr(h, "baseFilename", None) == str(log_file.resolve()) for h in root.handlers):
            fh = logging.FileHandler(str(log_file), encoding="utf-8")
            fh.setLevel(lvl)
            fh.setFormatter(logging.Formatter(DEFAULT_FMT))
            root.addHandler(fh)
        chmod_restringido(log_file)

    return logging.getLogger(LOGGER_NAME)


def log_exception(msg: str, *, extra: dict | None = None, level: int = logging.WARNING) -> None:
    """Loggea una excepción con contexto sin romper el flujo."""
    if extra:
        ctx = " ".join(f"{k}={v!r}" for k, v in extra.items())
        msg = f"{msg} | {ctx}"
    logging.getLogger(LOGGER_NAME).log(level, msg, exc_info=True)
