from pathlib import Path
import os

from dotenv import load_dotenv

load_dotenv()

# Raíz del paquete estimador/  ->  .../estimador
APP_DIR = Path(__file__).resolve().parents[1]
# Raíz del repo (padre de estimador/)
REPO_ROOT = APP_DIR.parent

# === Base de datos ===
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./estimador.db")

# === CORS ===
_origins = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [o.strip() for o in _origins.split(",") if o.strip()] or ["http://localhost:5173"]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Tiempo por pregunta cuando no viene o es inválido (segundos)
DEFAULT_TIME = 10

# === Cliente (scripts de backoffice) ===
API_URL = os.getenv("API_URL", "http://localhost:3001").rstrip("/")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "5"))

# Snapshot local de {topic: [preguntas]} para cuando la API no responde
LOCAL_CACHE_PATH = Path(
    os.getenv("LOCAL_CACHE_PATH", Path.home() / ".estimador" / "questions.json")
).expanduser()

# === Partidas en memoria ===
# Sin actividad por este tiempo (segundos) la partida se descarta
PLAY_IDLE_SECONDS = float(os.getenv("PLAY_IDLE_SECONDS", "1800"))
PLAY_MAX_SESSIONS = int(os.getenv("PLAY_MAX_SESSIONS", "1000"))
