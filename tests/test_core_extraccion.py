from extractor_asistencia.config import AppConfig
from extractor_asistencia.core import detectar_bloques, extraer_registros
from extractor_asistencia.grid import normalizar_grid
from extractor_asistencia.parsers import NO_HAY_REGISTRO, REGISTRO_INCOMPLETO


def _header(emp_id, nombre, depto):
    return ["ID :", "x", emp_id, "Nombre :", nombre, "Dept. :", "x", depto]


def test_escenario_completo_un_empleado():
    grid = [
        _header("E001", "Jane Doe", "Sales"),
        ["08:00\n16:00", "08:00\n15:30"],
    ]
    registros = extraer_registros(grid, ["1", "2"], "Jul", 2025)
    assert registros == [
        {
            "ID": "E001",
            "Nombre": "Jane Doe",
            "Departamento": "Sales",
            "1-Jul-2025": "08:00\n16:00",
            "Horas-1": 8.0,
            "2-Jul-2025": "08:00\n15:30",
            "Horas-2": 7.5,
            "Horas/Día": 7.75,
            "Días Cumplidos": 1,
            "Días Incumplidos": 1,
        }
    ]
    assert list(registros[0].keys()) == [
        "ID", "Nombre", "Departamento",
        "1-Jul-2025", "Horas-1", "2-Jul-2025", "Horas-2",
        "Horas/Día", "Días Cumplidos", "Días Incumplidos",
    ]


def test_grid_vacio():
    assert extraer_registros([], ["1"], "Jul", 2025) == []


def test_sin_encabezados():
    grid = [["Reporte de asistencia"], ["08:00\n16:00"]]
    assert extraer_registros(grid, ["1"], "Jul", 2025) == []


def test_orden_de_aparicion():
    grid = [
        ["Reporte mensual"],
        _header("E2", "Bea", "Ops"),
        ["08:00\n16:00"],
        _header("E1", "Ana", "Ops"),
        ["08:00\n16:00"],
    ]
    registros = extraer_registros(grid, ["5"], "Ago", 2024)
    assert [r["ID"] for r in registros] == ["E2", "E1"]


def test_encabezado_corto_se_omite_y_salta_fila_de_checadas():
    grid = [
        ["ID :", "x"],                    # sin ID (offset fuera de la fila) ni nombre
        ["ID :", "x", "NO-ES-EMPLEADO"],  # sería la fila de checadas; no debe leerse como encabezado
        _header("E5", "Eva", "RH"),
        ["08:00\n16:00"],
    ]
    registros = extraer_registros(grid, ["1"], "Jul", 2025)
    assert [r["ID"] for r in registros] == ["E5"]


def test_encabezado_solo_con_nombre_se_conserva():
    # "ID :" al final: su valor quedaría fuera de la fila
    grid = [["Nombre :", "Luis", "ID :"], ["08:00\n16:00"]]
    registros = extraer_registros(grid, ["1"], "Jul", 2025)
    assert len(registros) == 1
    assert registros[0]["ID"] == ""
    assert registros[0]["Nombre"] == "Luis"
    assert registros[0]["Departamento"] == ""


def test_encabezado_al_final_sin_fila_de_checadas():
    grid = [_header("E9", "Ivan", "TI")]
    registros = extraer_registros(grid, ["1", "2"], "Jul", 2025)
    r = registros[0]
    assert r["1-Jul-2025"] == ""
    assert r["Horas-1"] == NO_HAY_REGISTRO
    assert r["Horas-2"] == NO_HAY_REGISTRO
    assert r["Horas/Día"] == 0
    assert r["Días Cumplidos"] == 0
    assert r["Días Incumplidos"] == 0


def test_mas_dias_que_celdas_y_celdas_sobrantes():
    grid = [_header("E1", "Ana", "Ops"), ["08:00\n16:00", "07:00", "08:00\n17:00"]]
    r = extraer_registros(grid, ["1", "2"], "Jul", 2025)[0]
    # la tercera celda se ignora
    assert "3-Jul-2025" not in r
    assert r["Horas-2"] == REGISTRO_INCOMPLETO

    r = extraer_registros(grid, ["1", "2", "3", "4"], "Jul", 2025)[0]
    assert r["4-Jul-2025"] == ""
    assert r["Horas-4"] == NO_HAY_REGISTRO
    assert r["Horas-3"] == 9.0


def test_incompleto_cuenta_como_incumplido_y_sin_registro_no_cuenta():
    grid = [_header("E1", "Ana", "Ops"), ["08:00", None, "08:00\n16:00"]]
    r = extraer_registros(grid, ["1", "2", "3"], "Jul", 2025)[0]
    assert r["Horas-1"] == REGISTRO_INCOMPLETO
    assert r["Horas-2"] == NO_HAY_REGISTRO
    assert r["Días Cumplidos"] == 1
    assert r["Días Incumplidos"] == 1
    # el promedio solo considera días numéricos
    assert r["Horas/Día"] == 8.0


def test_valor_no_texto_se_guarda_tal_cual():
    grid = [_header("E1", "Ana", "Ops"), [0.5]]
    r = extraer_registros(grid, ["1"], "Jul", 2025)[0]
    assert r["1-Jul-2025"] == 0.5
    assert r["Horas-1"] == NO_HAY_REGISTRO


def test_marcadores_desplazados_tras_normalizar():
    crudo = [
        [None, None, "ID :", None, "x", "E7", None, "Nombre :", "Rosa", None, "Dept. :", "x", "Compras"],
        [None, None, None, None, None, None, None, None, None, None, None, None, None],
        [None, None, "08:00\n16:00", None, "08:00\n12:00", None, None, None, None, None, None, None, None],
    ]
    grid = normalizar_grid(crudo)
    r = extraer_registros(grid, ["1", "2"], "Jul", 2025)[0]
    assert (r["ID"], r["Nombre"], r["Departamento"]) == ("E7", "Rosa", "Compras")
    assert r["Horas-1"] == 8.0
    assert r["Horas-2"] == 4.0


def test_offset_nombre_configurable():
    cfg = AppConfig()
    cfg.offset_nombre = 2
    grid = [["ID :", "x", "E1", "Nombre :", "x", "Ana"], ["08:00\n16:00"]]
    r = extraer_registros(grid, ["1"], "Jul", 2025, cfg)[0]
    assert r["Nombre"] == "Ana"


def test_detectar_bloques_conserva_fila_de_origen():
    grid = [["titulo"], _header("E1", "Ana", "Ops"), ["08:00\n16:00"]]
    bloques = list(detectar_bloques(grid))
    assert len(bloques) == 1
    assert bloques[0].fila == 1
    assert bloques[0].checadas == ("08:00\n16:00",)
