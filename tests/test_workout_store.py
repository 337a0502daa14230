import logging

import pytest

from app.core.config import Settings
from app.models.exercicio import ExercicioCreate
from app.models.serie import SerieCreate, SerieUpdate
from app.repositories.base import PersistenciaError, TreinoRepository
from app.repositories.local_repository import LocalRepository
from app.services.workout_store import WorkoutStore, create_store
from app.repositories.duckdb_repository import DuckDBRepository
from conftest import make_treino


class BrokenRepository(TreinoRepository):
    """Repositório que falha em todas as operações."""

    def __init__(self):
        self.chamadas = 0

    def _falha(self, *args):
        self.chamadas += 1
        raise PersistenciaError("backend fora do ar")

    load_all = _falha
    create_treino = _falha
    update_treino = _falha
    delete_treino = _falha
    create_exercicio = _falha
    update_exercicio = _falha
    delete_exercicio = _falha
    create_serie = _falha
    update_serie = _falha
    delete_serie = _falha


def test_timer_example(local_store, relogio):
    treino = local_store.add_treino("Peito")

    relogio.advance(30)
    pausado = local_store.pause(treino.id)
    assert pausado.duracao == 30
    assert pausado.pausado_em == relogio.agora

    relogio.advance(270)
    retomado = local_store.resume(treino.id)
    assert retomado.duracao == 30
    assert local_store.elapsed(treino.id) == 30

    relogio.advance(20)
    assert local_store.elapsed(treino.id) == 50
    concluido = local_store.complete(treino.id)
    assert concluido.duracao == 50

    relogio.advance(1000)
    assert local_store.elapsed(treino.id) == 50


def test_elapsed_does_not_write(local_store, relogio):
    treino = local_store.add_treino("Peito")
    relogio.advance(90)

    assert local_store.elapsed(treino.id) == 90
    assert local_store.get_treino(treino.id).duracao == 0


def test_completed_treino_is_not_touched_again(local_store, relogio):
    treino = local_store.add_treino("Costas")
    relogio.advance(60)
    concluido = local_store.complete(treino.id)

    relogio.advance(60)
    assert local_store.pause(treino.id) is concluido
    assert local_store.resume(treino.id) is concluido
    assert local_store.adjust_time(treino.id, 30) is concluido
    assert local_store.set_duration(treino.id, 5) is concluido
    assert local_store.get_treino(treino.id).duracao == 60


def test_adjust_and_set_duration(local_store):
    treino = local_store.add_treino("Pernas")
    local_store.pause(treino.id)

    assert local_store.adjust_time(treino.id, 10).duracao == 10
    assert local_store.adjust_time(treino.id, -25).duracao == 0
    assert local_store.set_duration(treino.id, 125).duracao == 125


def test_unknown_ids_return_none(local_store):
    assert local_store.get_treino("x") is None
    assert local_store.pause("x") is None
    assert local_store.elapsed("x") is None
    assert local_store.delete_treino("x") is False
    assert local_store.add_exercicio("x", ExercicioCreate(nome="Supino")) is None

    treino = local_store.add_treino("Peito")
    assert local_store.add_serie(treino.id, "y", SerieCreate(carga=10, repeticoes=10)) is None
    assert local_store.delete_exercicio(treino.id, "y") is False


def test_exercicio_and_serie_lifecycle_persists(local_store, tmp_path):
    treino = local_store.add_treino("Peito")
    exercicio = local_store.add_exercicio(
        treino.id, ExercicioCreate(nome="Supino", grupo_muscular="peito")
    )
    serie = local_store.add_serie(treino.id, exercicio.id, SerieCreate(carga=50, repeticoes=10))
    assert serie.concluida is False

    atualizada = local_store.update_serie(
        treino.id, exercicio.id, serie.id, SerieUpdate(carga=52.5, repeticoes=8, concluida=True)
    )
    assert atualizada.id == serie.id

    renomeado = local_store.update_exercicio(
        treino.id, exercicio.id, ExercicioCreate(nome="Supino reto", grupo_muscular="peito")
    )
    assert len(renomeado.series) == 1

    # O arquivo reflete o mesmo estado da memória
    [do_disco] = LocalRepository(str(tmp_path / "treinos.json")).load_all()
    assert do_disco == local_store.get_treino(treino.id)

    assert local_store.delete_serie(treino.id, exercicio.id, serie.id) is True
    assert local_store.get_exercicio(treino.id, exercicio.id).series == []
    assert local_store.delete_exercicio(treino.id, exercicio.id) is True
    assert local_store.get_treino(treino.id).exercicios == []


def test_new_treinos_come_first(local_store, relogio):
    local_store.add_treino("A")
    relogio.advance(60)
    local_store.add_treino("B")

    assert [t.nome for t in local_store.list_treinos()] == ["B", "A"]
    assert [t.nome for t in local_store.list_treinos("a")] == ["A"]


def test_persistence_failure_keeps_memory_state(relogio, caplog):
    repo = BrokenRepository()
    store = WorkoutStore(repo, clock=relogio)

    with caplog.at_level(logging.ERROR):
        store.load()
        treino = store.add_treino("Peito")
        relogio.advance(45)
        pausado = store.pause(treino.id)

    assert store.get_treino(treino.id) == pausado
    assert pausado.duracao == 45
    assert repo.chamadas == 3
    assert "backend fora do ar" in caplog.text


def test_load_falls_back_to_backup(tmp_path, relogio):
    backup = LocalRepository(str(tmp_path / "backup.json"))
    backup.save_snapshot([make_treino("do backup")])

    store = WorkoutStore(BrokenRepository(), backup=backup, clock=relogio)

    assert [t.nome for t in store.load()] == ["do backup"]


def test_backup_receives_snapshot_after_each_mutation(tmp_path, relogio):
    backup = LocalRepository(str(tmp_path / "backup.json"))
    repo = DuckDBRepository(str(tmp_path / "treinos.duckdb"), "teste")
    store = WorkoutStore(repo, backup=backup, clock=relogio)
    store.load()

    treino = store.add_treino("Peito")
    store.add_exercicio(treino.id, ExercicioCreate(nome="Supino"))

    assert backup.load_all() == repo.load_all() == store.list_treinos()
    store.close()


def test_sync_overwrites_local_state(tmp_path, relogio, caplog):
    repo = DuckDBRepository(str(tmp_path / "treinos.duckdb"), "teste")
    store = WorkoutStore(repo, clock=relogio)
    store.load()
    treino = store.add_treino("Peito")

    # Edição que não chegou ao backend
    store.repository = BrokenRepository()
    store.rename_treino(treino.id, "Editado offline")
    store.repository = repo

    with caplog.at_level(logging.WARNING):
        sincronizados = store.sync()

    assert [t.nome for t in sincronizados] == ["Peito"]
    assert store.get_treino(treino.id).nome == "Peito"
    assert "sobrescreveu" in caplog.text
    store.close()


def test_sync_failure_keeps_local_state(relogio):
    store = WorkoutStore(BrokenRepository(), clock=relogio)
    treino = store.add_treino("Peito")

    assert store.sync() == [treino]


@pytest.mark.parametrize("backend, esperado", [("duckdb", DuckDBRepository), ("local", LocalRepository), ("supabase", LocalRepository)])
def test_create_store_selects_repository(settings, relogio, monkeypatch, backend, esperado):
    monkeypatch.setenv("STORAGE_BACKEND", backend)

    store = create_store(Settings(), clock=relogio)

    assert isinstance(store.repository, esperado)
    store.close()


def test_create_store_without_backup(settings, relogio, monkeypatch):
    monkeypatch.setenv("LOCAL_BACKUP", "false")

    store = create_store(Settings(), clock=relogio)

    assert store.backup is None
    store.close()


def test_create_store_falls_back_to_local_when_duckdb_fails(settings, tmp_path, relogio, monkeypatch, caplog):
    # Um diretório no lugar do arquivo: o DuckDB não consegue abrir
    monkeypatch.setenv("DUCKDB_PATH", str(tmp_path))

    with caplog.at_level(logging.WARNING):
        store = create_store(Settings(), clock=relogio)

    assert isinstance(store.repository, LocalRepository)
    assert store.backup is None
    assert "DuckDB indisponível" in caplog.text

    store.load()
    treino = store.add_treino("Offline")
    assert store.get_treino(treino.id) == treino
    store.close()
