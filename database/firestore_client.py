"""
Cliente de Firestore a partir de FIREBASE_SERVICE_ACCOUNT_JSON
(el JSON completo del Service Account pegado en una única variable de entorno)
"""
import json
from typing import Optional

from google.cloud import firestore
from google.oauth2 import service_account

from config import FIREBASE_SERVICE_ACCOUNT_JSON


def _normalizar_private_key(info: dict) -> dict:
    # la private_key tiene que tener saltos de línea reales
    if isinstance(info.get("private_key"), str):
        info["private_key"] = info["private_key"].replace("\\n", "\n")
    return info


def cargar_credenciales(raw: Optional[str] = FIREBASE_SERVICE_ACCOUNT_JSON) -> dict:
    if not raw:
        raise RuntimeError("FIREBASE_SERVICE_ACCOUNT_JSON no está definida")

    try:
        info = json.loads(raw)
    except json.JSONDecodeError:
        # vino minificado/escapado
        try:
            info = json.loads(raw.replace("\\n", "\n"))
        except json.JSONDecodeError as e:
            raise RuntimeError("FIREBASE_SERVICE_ACCOUNT_JSON inválida (no es JSON)") from e

    return _normalizar_private_key(info)


def crear_cliente_firestore(raw: Optional[str] = FIREBASE_SERVICE_ACCOUNT_JSON) -> firestore.Client:
    info = cargar_credenciales(raw)
    credentials = service_account.Credentials.from_service_account_info(info)
    return firestore.Client(project=info.get("project_id"), credentials=credentials)
