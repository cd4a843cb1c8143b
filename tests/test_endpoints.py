"""
Tests de los endpoints HTTP de reconciliación
"""

from unittest.mock import patch

from conftest import AYER, MANIANA, TS, sembrar

RECOMPUTE_URL = "/api/recomputeHostingStatus"
DETECT_URL = "/api/cron/detectUnreportedChecks"
RESCUE_URL = "/api/cron/rescue-link-fx"


class TestRecomputeEndpoint:
    """Tests para POST /api/recomputeHostingStatus"""

    def test_recompute_ok(self, client, store):
        sembrar(store, {
            "a": {"checkin_at": TS},
            "b": {"contacted_at": TS, "hosting_status": "contactado"},
        })

        response = client.post(RECOMPUTE_URL, json={"batchSize": 1})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "processed": 2, "updated": 1, "dryRun": False}
        assert store.get("a").get("hosting_status") == "checked_in"

    def test_recompute_sin_body_usa_defaults(self, client, store):
        sembrar(store, {"a": {"checkin_at": TS}})

        response = client.post(RECOMPUTE_URL)

        assert response.status_code == 200
        assert response.json()["processed"] == 1

    def test_recompute_dry_run(self, client, store):
        sembrar(store, {"a": {"checkin_at": TS}})

        response = client.post(RECOMPUTE_URL, json={"dryRun": True})

        assert response.json() == {"ok": True, "processed": 1, "updated": 1, "dryRun": True}
        assert store.get("a").get("hosting_status") is None

    def test_batch_size_fuera_de_rango(self, client):
        response = client.post(RECOMPUTE_URL, json={"batchSize": 501})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_metodo_no_permitido(self, client):
        response = client.get(RECOMPUTE_URL)

        assert response.status_code == 405
        assert response.json() == {"error": "Método no permitido"}

    def test_preflight(self, client):
        response = client.options(RECOMPUTE_URL)

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_preflight_cors(self, client):
        response = client.options(
            RECOMPUTE_URL,
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_error_del_store_devuelve_500(self, client, store):
        with patch.object(store, "page_after", side_effect=RuntimeError("deadline exceeded")):
            response = client.post(RECOMPUTE_URL, json={})

        assert response.status_code == 500
        assert response.json() == {"error": "deadline exceeded"}


class TestDetectUnreportedEndpoint:
    """Tests para POST /api/cron/detectUnreportedChecks"""

    def test_detect_ok(self, client, store):
        sembrar(store, {"r1": {"arrival_iso": AYER, "departure_iso": MANIANA}})

        response = client.post(DETECT_URL, json={"limit": 10})

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "dryRun": False,
            "todayISO": "2025-03-10",
            "summary": {
                "checkin_scanned": 1,
                "checkin_marked": 1,
                "checkout_scanned": 0,
                "checkout_marked": 0,
            },
        }

    def test_limit_invalido(self, client):
        response = client.post(DETECT_URL, json={"limit": 0})

        assert response.status_code == 400

    def test_metodo_no_permitido(self, client):
        assert client.put(DETECT_URL, json={}).status_code == 405

    def test_token_requerido_si_esta_configurado(self, client):
        from main import app
        from utils.dependencies import get_auth_token

        app.dependency_overrides[get_auth_token] = lambda: "secreto"

        sin_token = client.post(DETECT_URL, json={"dryRun": True})
        con_token = client.post(DETECT_URL, json={"dryRun": True}, headers={"Authorization": "Bearer secreto"})

        assert sin_token.status_code == 401
        assert sin_token.json() == {"error": "unauthorized"}
        assert con_token.status_code == 200


class TestRescueFxEndpoint:
    """Tests para /api/cron/rescue-link-fx"""

    def test_sin_base_url(self, client):
        with patch("config.get_rescue_base_url", return_value=None):
            response = client.get(RESCUE_URL)

        assert response.status_code == 500
        assert response.json() == {"error": "No RESCUE_BASE_URL/VERCEL_URL available"}

    def test_reenvia_status_del_endpoint_interno(self, client):
        from services.fx_rescue_service import RescateFxResult

        with patch("config.get_rescue_base_url", return_value="https://backoffice.example.com"), \
                patch("endpoints.cron.disparar_rescate_fx", return_value=RescateFxResult(503, {"ok": False, "data": {}})) as disparo:
            response = client.post(RESCUE_URL)

        assert response.status_code == 503
        assert response.json() == {"ok": False, "data": {}}
        assert disparo.call_args.args[1] == "https://backoffice.example.com"


class TestRateLimit:
    """Tests del límite de invocaciones de los jobs"""

    def test_exceso_devuelve_429_con_formato_error(self, client):
        from config import JOBS_RATE_LIMIT
        from utils.rate_limiter import limiter

        limiter.enabled = True
        limiter.reset()
        permitidas = int(JOBS_RATE_LIMIT.split("/")[0])

        for _ in range(permitidas):
            assert client.post(RECOMPUTE_URL, json={"dryRun": True}).status_code == 200
        response = client.post(RECOMPUTE_URL, json={"dryRun": True})
        limiter.reset()

        assert response.status_code == 429
        assert response.json()["error"].startswith("Rate limit exceeded")
        assert response.headers["access-control-allow-origin"] == "*"
