from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.models.exercicio import Exercicio
from app.models.serie import Serie
from app.models.treino import Treino
from app.repositories.local_repository import LocalRepository
from app.services.workout_store import WorkoutStore


INICIO = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Relógio controlado pelos testes."""

    def __init__(self, agora: datetime = INICIO):
        self.agora = agora

    def __call__(self) -> datetime:
        return self.agora

    def advance(self, segundos: int) -> datetime:
        self.agora = self.agora + timedelta(seconds=segundos)
        return self.agora


def make_treino(nome="Treino A", data=INICIO, exercicios=None, **extra) -> Treino:
    return Treino(nome=nome, data=data, inicio=data, exercicios=exercicios or [], **extra)


def make_exercicio(nome="Supino", grupo="peito", cargas=()) -> Exercicio:
    return Exercicio(
        nome=nome,
        grupo_muscular=grupo,
        series=[Serie(carga=carga, repeticoes=reps) for carga, reps in cargas],
    )


@pytest.fixture
def relogio():
    return FixedClock()


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "duckdb")
    monkeypatch.setenv("DUCKDB_PATH", str(tmp_path / "treinos.duckdb"))
    monkeypatch.setenv("LOCAL_STORE_PATH", str(tmp_path / "treinos.json"))
    monkeypatch.setenv("LOCAL_BACKUP", "true")
    monkeypatch.setenv("USER_ID", "teste")
    return Settings()


@pytest.fixture
def local_store(tmp_path, relogio):
    store = WorkoutStore(LocalRepository(str(tmp_path / "treinos.json")), clock=relogio)
    store.load()
    return store


@pytest.fixture
def client(settings, relogio):
    with TestClient(create_app(settings, clock=relogio)) as client:
        yield client
