from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# DB SQLite su file nella root del progetto (accanto a streamlit_app.py)
DB_PATH = Path(__file__).resolve().parents[1] / "ambulatorio.sqlite"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")
SQL_ECHO = os.getenv("SQL_ECHO", "0") == "1"

# In produzione: mettila in variabile d'ambiente
JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_DEV_SECRET")
JWT_ALG = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "0") == "1"

# Lingua dei messaggi di errore se la richiesta non ne indica una supportata
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "it")

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
