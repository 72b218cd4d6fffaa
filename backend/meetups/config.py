"""
Конфигурация бэкенда митапов.
"""

from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv()

# Корневая директория проекта и базовые настройки
BASE_DIR = Path(__file__).parent.parent  # backend/
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


# ============= DATA =============
DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
DATA_DIR.mkdir(parents=True, exist_ok=True)

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{str(DATA_DIR / 'meetups.db')}")


# ============= ЛОГИ =============
LOGS_DIR = Path(os.getenv("LOGS_DIR", BASE_DIR / "logs"))
LOGS_DIR.mkdir(parents=True, exist_ok=True)


# ============= БЕЗОПАСНОСТЬ =============
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 24 * 60))
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")


# ============= API =============
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SERVER_PORT", 2022))
API_VERSION = "1.0.0"

# Через запятую, "*" - разрешить всем
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
