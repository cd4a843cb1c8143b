"""
Tests del detector de check-ins / check-outs no informados
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from services.unreported_checks_service import (
    detectar_checks_no_informados,
    flag_para_checkin,
    requiere_flag_checkout,
)
from models.reserva import HostingStatus
from utils.timezone import HOTEL_TZ
from conftest import AYER, HOY, MANIANA, TS, reloj_fijo, sembrar


class TestReglas:

    def test_checkin_faltante_requiere_flag(self):
        data = {"arrival_iso": AYER, "departure_iso": MANIANA}
        assert flag_para_checkin(data, HOY) == HostingStatus.CHECKIN_NOT_INFORMED

    def test_checkin_registrado_no_requiere_flag(self):
        assert flag_para_checkin({"arrival_iso": AYER, "checkin_at": TS}, HOY) is None

    def test_ya_marcado_no_requiere_flag(self):
        data = {"arrival_iso": AYER, "hosting_status": "checkin_not_informed"}
        assert flag_para_checkin(data, HOY) is None

    def test_checkout_pendiente_tiene_precedencia(self):
        data = {"arrival_iso": "2025-03-01", "departure_iso": AYER}
        assert flag_para_checkin(data, HOY) == HostingStatus.CHECKOUT_NOT_INFORMED
        assert requiere_flag_checkout(data)

    def test_checkin_not_informed_pasa_a_checkout_not_informed(self):
        data = {"arrival_iso": "2025-03-01", "departure_iso": AYER, "hosting_status": "checkin_not_informed"}
        assert flag_para_checkin(data, HOY) == HostingStatus.CHECKOUT_NOT_INFORMED

    def test_checkout_registrado(self):
        assert not requiere_flag_checkout({"departure_iso": AYER, "checkout_at": TS})
        assert not requiere_flag_checkout({"departure_iso": AYER, "hosting_status": "checkout_not_informed"})


class TestDetector:

    def test_limite_de_hoy_no_se_marca_y_ayer_si(self, store, clock):
        sembrar(store, {
            "hoy": {"arrival_iso": HOY, "departure_iso": MANIANA},
            "ayer": {"arrival_iso": AYER, "departure_iso": MANIANA},
        })

        resultado = detectar_checks_no_informados(store, clock)

        assert resultado.today_iso == HOY
        assert resultado.summary["checkin_scanned"] == 1
        assert resultado.summary["checkin_marked"] == 1
        assert store.get("ayer").get("hosting_status") == "checkin_not_informed"
        assert store.get("ayer").get("lastUpdatedBy") == "system_detectUnreported"
        assert store.get("hoy").get("hosting_status") is None

    def test_checkout_no_informado(self, store, clock):
        sembrar(store, {
            "sin_checkout": {"arrival_iso": "2025-03-05", "departure_iso": AYER, "checkin_at": TS, "hosting_status": "checked_in"},
            "con_checkout": {"arrival_iso": "2025-03-05", "departure_iso": AYER, "checkin_at": TS, "checkout_at": TS, "hosting_status": "checked_out"},
        })

        resultado = detectar_checks_no_informados(store, clock)

        assert resultado.summary == {
            "checkin_scanned": 2,
            "checkin_marked": 0,
            "checkout_scanned": 2,
            "checkout_marked": 1,
        }
        assert store.get("sin_checkout").get("hosting_status") == "checkout_not_informed"
        assert store.get("con_checkout").get("hosting_status") == "checked_out"

    def test_re_ejecucion_escanea_pero_no_vuelve_a_marcar(self, store, clock):
        sembrar(store, {"r1": {"arrival_iso": AYER, "departure_iso": MANIANA}})

        primera = detectar_checks_no_informados(store, clock)
        segunda = detectar_checks_no_informados(store, clock)

        assert primera.summary["checkin_marked"] == 1
        assert segunda.summary["checkin_scanned"] == 1
        assert segunda.summary["checkin_marked"] == 0

    def test_sin_checkin_ni_checkout_queda_checkout_not_informed(self, store, clock):
        sembrar(store, {"r1": {"arrival_iso": "2025-03-01", "departure_iso": "2025-03-05"}})

        primera = detectar_checks_no_informados(store, clock)
        segunda = detectar_checks_no_informados(store, clock)

        assert primera.summary == {
            "checkin_scanned": 1,
            "checkin_marked": 1,
            "checkout_scanned": 1,
            "checkout_marked": 0,
        }
        assert store.get("r1").get("hosting_status") == "checkout_not_informed"
        # estable: no alterna entre los dos flags
        assert segunda.summary["checkin_marked"] == 0
        assert segunda.summary["checkout_marked"] == 0
        assert store.get("r1").get("hosting_status") == "checkout_not_informed"

    def test_precedencia_con_reserva_fuera_de_la_pagina_de_checkout(self, store, clock):
        # por llegada "a" va primero; por salida va primero "b"
        sembrar(store, {
            "a": {"arrival_iso": "2025-03-01", "departure_iso": "2025-03-08"},
            "b": {"arrival_iso": "2025-03-02", "departure_iso": "2025-03-03", "checkin_at": TS},
        })

        for _ in range(3):
            detectar_checks_no_informados(store, clock, limit=1)

        assert store.get("a").get("hosting_status") == "checkout_not_informed"
        assert store.get("b").get("hosting_status") == "checkout_not_informed"

    def test_dry_run_no_cuenta_dos_veces_la_precedencia(self, store, clock):
        sembrar(store, {"r1": {"arrival_iso": "2025-03-01", "departure_iso": "2025-03-05"}})

        simulado = detectar_checks_no_informados(store, clock, dry_run=True)

        assert simulado.summary["checkin_marked"] == 1
        assert simulado.summary["checkout_marked"] == 0

    def test_checkin_marcado_antes_pasa_a_checkout_cuando_vence_la_salida(self, store):
        sembrar(store, {"r1": {"arrival_iso": "2025-03-08", "departure_iso": "2025-03-10"}})

        detectar_checks_no_informados(store, reloj_fijo(HOTEL_TZ.localize(datetime(2025, 3, 9, 12, 0))))
        assert store.get("r1").get("hosting_status") == "checkin_not_informed"

        detectar_checks_no_informados(store, reloj_fijo(HOTEL_TZ.localize(datetime(2025, 3, 11, 12, 0))))
        assert store.get("r1").get("hosting_status") == "checkout_not_informed"

    def test_dry_run_no_escribe(self, store, clock):
        sembrar(store, {
            "r1": {"arrival_iso": AYER, "departure_iso": MANIANA},
            "r2": {"arrival_iso": "2025-03-01", "departure_iso": "2025-03-05", "checkin_at": TS},
        })

        with patch.object(store, "update", wraps=store.update) as spy:
            simulado = detectar_checks_no_informados(store, clock, dry_run=True)
        assert spy.call_count == 0
        assert store.get("r1").get("hosting_status") is None

        real = detectar_checks_no_informados(store, clock)
        assert simulado.summary == real.summary
        assert simulado.to_dict()["dryRun"] is True

    def test_limit_corta_cada_pasada(self, store, clock):
        sembrar(store, {f"r{i}": {"arrival_iso": "2025-03-0%d" % (i + 1), "departure_iso": MANIANA} for i in range(5)})

        resultado = detectar_checks_no_informados(store, clock, limit=3)

        assert resultado.summary["checkin_scanned"] == 3
        assert resultado.summary["checkin_marked"] == 3

    def test_hoy_se_calcula_en_hora_argentina(self, store):
        # 02:00 UTC del 10/03 son las 23:00 del 09/03 en Buenos Aires
        clock = reloj_fijo(datetime(2025, 3, 10, 2, 0))
        sembrar(store, {"r1": {"arrival_iso": AYER, "departure_iso": MANIANA}})

        resultado = detectar_checks_no_informados(store, clock)

        assert resultado.today_iso == AYER
        assert resultado.summary["checkin_scanned"] == 0

    def test_limit_invalido(self, store, clock):
        with pytest.raises(ValueError):
            detectar_checks_no_informados(store, clock, limit=0)
