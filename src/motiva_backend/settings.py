import os
import threading

def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value == None:
        return default
    try:
        return int(value)
    except ValueError:
        return default

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
        # Document store settings
        self.DOCUMENT_STORE = os.environ.get("DOCUMENT_STORE", "sql").lower()
        self.DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./motiva.db")
        # Gateway settings
        self.DEFAULT_PAGE_SIZE = _env_int("DEFAULT_PAGE_SIZE", 50)
        self.MAX_PAGE_SIZE = _env_int("MAX_PAGE_SIZE", 1000)
        self.SESSION_TTL_SECONDS = _env_int("SESSION_TTL_SECONDS", 86400)
        self.CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
        # Trainer that receives PAR-Q submissions and auto-assigned clients
        self.DEFAULT_TRAINER_ID = os.environ.get("DEFAULT_TRAINER_ID", "")

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
