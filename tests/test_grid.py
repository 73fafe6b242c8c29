import math

from extractor_asistencia.grid import buscar_marcador, celda_en, celda_vacia, normalizar_grid


def test_normalizar_grid_vacio():
    assert normalizar_grid([]) == []
    assert normalizar_grid([[None, ""], [], [None]]) == []


def test_normalizar_grid_quita_filas_y_columnas_vacias():
    grid = [
        [None, "ID :", None, "x", "E001"],
        [None, None, None, None, None],
        ["", "08:00\n16:00", "", None, "08:00"],
    ]
    assert normalizar_grid(grid) == [
        ["ID :", "x", "E001"],
        ["08:00\n16:00", None, "08:00"],
    ]


def test_normalizar_grid_filas_irregulares():
    grid = [
        ["a", None, "b", None, "c"],
        ["d"],
        [None, None, "e"],
    ]
    # columna 1 y 3 vacías en todas las filas (la fila corta cuenta como ausente)
    assert normalizar_grid(grid) == [["a", "b", "c"], ["d"], [None, "e"]]


def test_normalizar_grid_conserva_ceros_y_numeros():
    grid = [[0, None, 7.5], [None, None, None]]
    assert normalizar_grid(grid) == [[0, 7.5]]


def test_normalizar_grid_nan_es_vacio():
    grid = [[math.nan, "x"], [math.nan, math.nan]]
    assert normalizar_grid(grid) == [["x"]]


def test_normalizar_grid_idempotente():
    grid = [
        [None, "ID :", "", "E1", None, "Nombre :", "Ana"],
        [],
        ["", "08:00\n17:00", None, "08:10\n16:00"],
        [None, None, None, None, None, None, None, None],
    ]
    once = normalizar_grid(grid)
    assert normalizar_grid(once) == once


def test_normalizar_grid_no_reordena():
    grid = [["r1", None, 3], [None, None, None], ["r2", None, 1], ["r3", None, 2]]
    out = normalizar_grid(grid)
    assert [row[0] for row in out] == ["r1", "r2", "r3"]
    assert [row[1] for row in out] == [3, 1, 2]


def test_normalizar_grid_no_muta_entrada():
    grid = [["a", None], [None, None]]
    normalizar_grid(grid)
    assert grid == [["a", None], [None, None]]


def test_celda_helpers():
    assert celda_vacia(None)
    assert celda_vacia("")
    assert not celda_vacia(" ")
    assert not celda_vacia(0)
    assert celda_en(["a"], 3) is None
    assert celda_en(["a"], -1) is None


def test_buscar_marcador():
    fila = [1, "Nombre :", "Ana", "ID : ", "E9"]
    assert buscar_marcador(fila, "ID :") == 3
    assert buscar_marcador(fila, "Dept. :") is None
