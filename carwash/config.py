# carwash/config.py
import os

DATABASE_URL = os.getenv("CARWASH_DATABASE_URL", "sqlite:///./carwash.db")

# Müşteriye gönderilen değerlendirme linkinin ön yüzdeki adresi
RATING_BASE_URL = os.getenv("CARWASH_RATING_BASE_URL", "http://localhost:8080").rstrip("/")
RATING_TOKEN_SECRET = os.getenv("CARWASH_RATING_TOKEN_SECRET", "dev-key-change-me")
RATING_TOKEN_ALGORITHM = os.getenv("CARWASH_RATING_TOKEN_ALGORITHM", "HS256")
RATING_LINK_TTL_HOURS = int(os.getenv("CARWASH_RATING_LINK_TTL_HOURS", "168"))

DEFAULT_SERVICE_HOURS = float(os.getenv("CARWASH_DEFAULT_SERVICE_HOURS", "1"))

# rapor dönemi en fazla bu kadar gün olabilir
REPORT_MAX_DAYS = int(os.getenv("CARWASH_REPORT_MAX_DAYS", "366"))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CARWASH_CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8080").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("CARWASH_LOG_LEVEL", "INFO").upper()
SEED_CATALOG = os.getenv("CARWASH_SEED_CATALOG", "1") == "1"
