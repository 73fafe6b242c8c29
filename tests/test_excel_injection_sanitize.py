import pandas as pd
from extractor_asistencia.io import _sanitize_excel_injection

def test_sanitize_excel_injection_prefixes():
    df = pd.DataFrame({
        "Nombre": ["=HYPERLINK('x','y')", "+SUM(1,2)", "-1", "@cmd", "Normal", None],
        "Horas-1": [8.0, 7.5, 0.5, 1.0, 2.0, 3.0],
    })
    out = _sanitize_excel_injection(df)
    assert str(out.loc[0,"Nombre"]).startswith("'=")
    assert str(out.loc[1,"Nombre"]).startswith("'+")
    assert str(out.loc[2,"Nombre"]).startswith("'-")
    assert str(out.loc[3,"Nombre"]).startswith("'@")
    assert out.loc[4,"Nombre"] == "Normal"
    assert pd.isna(out.loc[5,"Nombre"]) or out.loc[5,"Nombre"] is None
    assert out["Horas-1"].tolist() == [8.0, 7.5, 0.5, 1.0, 2.0, 3.0]


def test_sanitize_no_muta_original():
    df = pd.DataFrame({"Nombre": ["=1+1"]})
    _sanitize_excel_injection(df)
    assert df.loc[0, "Nombre"] == "=1+1"


def test_sanitize_columna_string_dtype():
    df = pd.DataFrame({"Nombre": pd.array(["=1+1", "Ana"], dtype="string")})
    out = _sanitize_excel_injection(df)
    assert out.loc[0, "Nombre"] == "'=1+1"
    assert out.loc[1, "Nombre"] == "Ana"
