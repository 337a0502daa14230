from functools import lru_cache
from dotenv import load_dotenv
import logging
import os

# Carrega variáveis do .env
load_dotenv()

logger = logging.getLogger(__name__)

BACKENDS = ("duckdb", "local")


def _env_bool(name: str, default: bool) -> bool:
    valor = os.getenv(name)
    if valor is None:
        return default
    return valor.strip().lower() in ("1", "true", "yes", "sim", "on")


class Settings:
    def __init__(self):
        self.APP_NAME = os.getenv("APP_NAME", "Treino Tracker")
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
        self.STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "duckdb").lower()
        self.DB_PATH = os.getenv("DUCKDB_PATH", "data/treinos.duckdb")
        self.LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "data/treinos.json")
        self.LOCAL_BACKUP = _env_bool("LOCAL_BACKUP", True)
        self.USER_ID = os.getenv("USER_ID", "local")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.backend = self._resolve_backend()

    def _resolve_backend(self) -> str:
        """
        Backend de persistência efetivo.
        Valores desconhecidos caem no modo local (offline).
        """
        if self.STORAGE_BACKEND not in BACKENDS:
            logger.warning(
                "STORAGE_BACKEND '%s' desconhecido - usando modo local",
                self.STORAGE_BACKEND,
            )
            return "local"
        return self.STORAGE_BACKEND


@lru_cache
def get_settings() -> Settings:
    """
    Retorna uma única instância de Settings (singleton).
    As variáveis do .env já ficam carregadas.
    """
    return Settings()
