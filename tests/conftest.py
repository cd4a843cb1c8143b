import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from database.conexion import crear_engine, crear_session_factory, crear_tablas
from database.sql_store import SqlReservationStore
from utils.timezone import HOTEL_TZ, HotelClock

HOY = "2025-03-10"
AYER = "2025-03-09"
MANIANA = "2025-03-11"

TS = datetime(2025, 3, 1, 12, 0)


def reloj_fijo(dt: datetime) -> HotelClock:
    return HotelClock(now_fn=lambda: dt)


def sembrar(store: SqlReservationStore, docs: dict) -> None:
    for doc_id, data in docs.items():
        store.add(doc_id, data)


@pytest.fixture
def store():
    engine = crear_engine("sqlite://")
    crear_tablas(engine)
    sql_store = SqlReservationStore(crear_session_factory(engine), engine=engine)
    yield sql_store
    sql_store.close()


@pytest.fixture
def clock():
    # 10/03/2025 09:30 hora AR
    return reloj_fijo(HOTEL_TZ.localize(datetime(2025, 3, 10, 9, 30)))


@pytest.fixture
def client(store, clock):
    from main import app
    from utils.dependencies import get_auth_token, get_clock, get_store
    from utils.rate_limiter import limiter

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_auth_token] = lambda: None
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True
