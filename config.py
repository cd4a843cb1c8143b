"""
Configuración de la reconciliación de reservas (store, zona horaria, cron)
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# Timezone Configuration
HOTEL_TIMEZONE = os.getenv("HOTEL_TIMEZONE", "America/Argentina/Buenos_Aires")

# Store Configuration
STORE_BACKEND = os.getenv("STORE_BACKEND", "firestore").lower()  # firestore | sql
RESERVAS_COLLECTION = os.getenv("RESERVAS_COLLECTION", "Reservas")
FIREBASE_SERVICE_ACCOUNT_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        return (
            f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}"
            f"@{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
        )
    return "sqlite:///./reservas.db"


DATABASE_URL = _database_url()

# Jobs
UNREPORTED_LIMIT_DEFAULT = 2000
RECOMPUTE_BATCH_SIZE_DEFAULT = 500
RECOMPUTE_BATCH_SIZE_MAX = 500  # limite de operaciones por batch de Firestore

# Audit tags (lastUpdatedBy)
WRITER_RECOMPUTE = "system_recompute"
WRITER_DETECT_UNREPORTED = "system_detectUnreported"

# Rescue FX (cron)
RESCUE_BASE_URL = os.getenv("RESCUE_BASE_URL")
VERCEL_URL = os.getenv("VERCEL_URL")
AUTH_TOKEN = os.getenv("AUTH_TOKEN") or None
PROPERTY_IDS = os.getenv("PROPERTY_IDS", "")
RESCUE_TIMEOUT_SECONDS = float(os.getenv("RESCUE_TIMEOUT_SECONDS", "120"))
RESCUE_WINDOW_DAYS = 2  # hoy y 2 dias atras
RESCUE_PAGE_SIZE = 500

# Rate limiting
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
JOBS_RATE_LIMIT = os.getenv("JOBS_RATE_LIMIT", "30/minute")
REDIS_URL = os.getenv("REDIS_URL", "memory://")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "reconciliacion_logs.txt")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_ECHO_CONSOLE = os.getenv("LOG_ECHO_CONSOLE", "false").lower() == "true"


def get_rescue_base_url() -> Optional[str]:
    """Base URL para la llamada interna de rescate FX"""
    if RESCUE_BASE_URL:
        return RESCUE_BASE_URL
    if VERCEL_URL:
        return f"https://{VERCEL_URL}"
    return None


def get_property_ids() -> List[str]:
    """PROPERTY_IDS=100,101 -> ["100", "101"]"""
    return [p.strip() for p in PROPERTY_IDS.split(",") if p.strip()]
