from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from extractor_asistencia.config import AppConfig
from extractor_asistencia.io import HojaNoEncontradaError
from extractor_asistencia.pipeline import procesar_archivo


def _make_input_excel(path: Path) -> None:
    # Reporte del reloj: encabezado de empleado + fila de checadas, con columnas vacías intercaladas
    rows = [
        ["Reporte de Asistencia", None, None, None, None, None, None, None, None, None],
        [None, None, None, None, None, None, None, None, None, None],
        ["ID :", None, "x", "E001", None, "Nombre :", "Jane Doe", "Dept. :", "x", "Sales"],
        ["08:00\n16:00", None, "08:00\n15:30", None, None, None, None, None, None, None],
        ["ID :", None, "x", "E002", None, "Nombre :", "John Roe", "Dept. :", "x", "Ops"],
        ["07:55", None, None, None, None, None, None, None, None, None],
    ]
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Asistencia", header=False, index=False)


def test_pipeline_extrae_y_exporta(tmp_path: Path):
    inp = tmp_path / "reloj.xlsx"
    _make_input_excel(inp)
    res = procesar_archivo(inp, "Asistencia", ["1", "2"], "Jul", 2025, formatos=["csv", "html", "xlsx"])

    assert [r["ID"] for r in res.registros] == ["E001", "E002"]
    jane = res.registros[0]
    assert jane["Nombre"] == "Jane Doe"
    assert jane["Departamento"] == "Sales"
    assert jane["Horas-1"] == 8.0
    assert jane["Horas-2"] == 7.5
    assert jane["Horas/Día"] == 7.75
    john = res.registros[1]
    assert john["Horas-1"] == "REGISTRO INCOMPLETO"
    assert john["Horas-2"] == "NO HAY REGISTRO"
    assert john["Días Incumplidos"] == 1

    assert set(res.salidas) == {"csv", "html", "xlsx"}
    for out in res.salidas.values():
        assert out.exists()
        assert out.parent == tmp_path
        assert out.stem == "RegistroAsistenciaDepurado"


def test_pipeline_dry_run_no_escribe(tmp_path: Path):
    inp = tmp_path / "reloj.xlsx"
    _make_input_excel(inp)
    res = procesar_archivo(inp, "Asistencia", ["1"], "Jul", 2025, dry_run=True)
    assert len(res.registros) == 2
    assert res.salidas == {}
    assert not (tmp_path / "RegistroAsistenciaDepurado.csv").exists()


def test_pipeline_out_dir_y_nombre_config(tmp_path: Path):
    inp = tmp_path / "reloj.xlsx"
    _make_input_excel(inp)
    cfg = AppConfig()
    cfg.nombre_salida = "julio"
    res = procesar_archivo(inp, "Asistencia", ["1"], "Jul", 2025, cfg=cfg, formatos=["csv"], out_dir=tmp_path / "out")
    assert res.salidas["csv"] == tmp_path / "out" / "julio.csv"
    assert res.salidas["csv"].exists()


def test_pipeline_hoja_inexistente(tmp_path: Path):
    inp = tmp_path / "reloj.xlsx"
    _make_input_excel(inp)
    with pytest.raises(HojaNoEncontradaError, match="Asistencia"):
        procesar_archivo(inp, "Hoja1", ["1"], "Jul", 2025)


def test_pipeline_sin_registros_no_es_error(tmp_path: Path):
    inp = tmp_path / "vacio.xlsx"
    with pd.ExcelWriter(inp, engine="openpyxl") as writer:
        pd.DataFrame([["Sin empleados"]]).to_excel(writer, sheet_name="Asistencia", header=False, index=False)
    res = procesar_archivo(inp, "Asistencia", ["1"], "Jul", 2025)
    assert res.vacio
    assert res.salidas == {}
    assert list(tmp_path.glob("RegistroAsistenciaDepurado.*")) == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"mes": "J"},
        {"mes": "Julio"},
        {"anio": 1800},
        {"dias": []},
        {"formatos": ["pdf"]},
    ],
)
def test_pipeline_parametros_invalidos(tmp_path: Path, kwargs):
    inp = tmp_path / "reloj.xlsx"
    _make_input_excel(inp)
    params = {"dias": ["1"], "mes": "Jul", "anio": 2025}
    params.update(kwargs)
    formatos = params.pop("formatos", None)
    with pytest.raises(ValueError):
        procesar_archivo(inp, "Asistencia", params["dias"], params["mes"], params["anio"], formatos=formatos)
