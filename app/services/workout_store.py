# app/services/workout_store.py

import logging
import threading
from typing import Callable, List, Optional, Tuple

from app.core.clock import Clock, utc_now
from app.core.config import Settings
from app.models.exercicio import Exercicio, ExercicioCreate
from app.models.serie import Serie, SerieCreate, SerieUpdate
from app.models.treino import Treino
from app.repositories.base import PersistenciaError, TreinoRepository
from app.repositories.duckdb_repository import DuckDBRepository
from app.repositories.local_repository import LocalRepository
from app.services import treinos_service
from app.services.cronometro import live_elapsed
from app.services.estatisticas_service import search_treinos

logger = logging.getLogger(__name__)


class WorkoutStore:
    """
    Dono da coleção de treinos em memória.

    Toda mutação é aplicada primeiro em memória e depois enviada ao
    repositório. Falha de persistência é logada e NÃO desfaz a mudança:
    o estado local fica à frente do remoto até o próximo sync().
    """

    def __init__(
        self,
        repository: TreinoRepository,
        backup: Optional[LocalRepository] = None,
        clock: Clock = utc_now,
    ):
        self.repository = repository
        self.backup = backup
        self.clock = clock
        self._treinos: List[Treino] = []
        self._lock = threading.RLock()

    # ---------- CICLO DE VIDA ----------

    def load(self) -> List[Treino]:
        with self._lock:
            try:
                self._treinos = self.repository.load_all()
            except PersistenciaError as exc:
                logger.error("Erro ao carregar treinos: %s", exc)
                self._treinos = self._load_backup()
                return list(self._treinos)

            self._save_backup()
            logger.info("%d treinos carregados", len(self._treinos))
            return list(self._treinos)

    def sync(self) -> List[Treino]:
        """
        Relê tudo do repositório e sobrescreve o estado em memória.
        Alterações locais ainda não gravadas no repositório são descartadas.
        """
        with self._lock:
            try:
                remotos = self.repository.load_all()
            except PersistenciaError as exc:
                logger.error("Erro ao sincronizar treinos: %s", exc)
                return list(self._treinos)

            if remotos != self._treinos:
                logger.warning(
                    "Sync sobrescreveu o estado local (%d -> %d treinos)",
                    len(self._treinos),
                    len(remotos),
                )
            self._treinos = remotos
            self._save_backup()
            return list(self._treinos)

    def close(self) -> None:
        self.repository.close()
        if self.backup is not None:
            self.backup.close()

    def _load_backup(self) -> List[Treino]:
        if self.backup is None:
            return []
        try:
            treinos = self.backup.load_all()
        except PersistenciaError as exc:
            logger.error("Erro ao carregar backup local: %s", exc)
            return []
        logger.warning("Usando backup local (%d treinos)", len(treinos))
        return treinos

    def _save_backup(self) -> None:
        if self.backup is None:
            return
        try:
            self.backup.save_snapshot(self._treinos)
        except PersistenciaError as exc:
            logger.error("Erro ao gravar backup local: %s", exc)

    def _persist(self, descricao: str, operacao: Callable, *args) -> None:
        try:
            operacao(*args)
        except PersistenciaError as exc:
            logger.error("Erro ao %s: %s", descricao, exc)
        self._save_backup()

    # ---------- CONSULTA ----------

    def list_treinos(self, busca: Optional[str] = None) -> List[Treino]:
        with self._lock:
            return search_treinos(self._treinos, busca)

    def get_treino(self, treino_id: str) -> Optional[Treino]:
        with self._lock:
            return next((t for t in self._treinos if t.id == treino_id), None)

    def get_exercicio(self, treino_id: str, exercicio_id: str) -> Optional[Exercicio]:
        treino = self.get_treino(treino_id)
        if treino is None:
            return None
        return next((e for e in treino.exercicios if e.id == exercicio_id), None)

    def elapsed(self, treino_id: str) -> Optional[int]:
        """Tempo para exibição; recalculado a cada leitura, sem gravar."""
        treino = self.get_treino(treino_id)
        if treino is None:
            return None
        return live_elapsed(treino, self.clock())

    def _replace(self, novo: Treino) -> None:
        self._treinos = [novo if t.id == novo.id else t for t in self._treinos]

    # ---------- TREINOS ----------

    def add_treino(self, nome: str) -> Treino:
        with self._lock:
            treino = treinos_service.novo_treino(nome, self.clock())
            self._treinos = [treino] + self._treinos
            self._persist("criar treino", self.repository.create_treino, treino)
            return treino

    def rename_treino(self, treino_id: str, nome: str) -> Optional[Treino]:
        with self._lock:
            treino = self.get_treino(treino_id)
            if treino is None:
                return None
            novo = treino.model_copy(update={"nome": nome})
            self._replace(novo)
            self._persist("atualizar treino", self.repository.update_treino, novo)
            return novo

    def delete_treino(self, treino_id: str) -> bool:
        with self._lock:
            if self.get_treino(treino_id) is None:
                return False
            self._treinos = [t for t in self._treinos if t.id != treino_id]
            self._persist("remover treino", self.repository.delete_treino, treino_id)
            return True

    # ---------- TEMPO ----------

    def _transition(self, treino_id: str, transicao: Callable[[Treino], Treino]) -> Optional[Treino]:
        with self._lock:
            treino = self.get_treino(treino_id)
            if treino is None:
                return None

            novo = transicao(treino)
            if novo is treino:
                # Transição não se aplica ao estado atual
                return treino

            self._replace(novo)
            self._persist("atualizar treino", self.repository.update_treino, novo)
            return novo

    def pause(self, treino_id: str) -> Optional[Treino]:
        return self._transition(
            treino_id, lambda t: treinos_service.pause_treino(t, self.clock())
        )

    def resume(self, treino_id: str) -> Optional[Treino]:
        return self._transition(
            treino_id, lambda t: treinos_service.resume_treino(t, self.clock())
        )

    def complete(self, treino_id: str) -> Optional[Treino]:
        return self._transition(
            treino_id, lambda t: treinos_service.complete_treino(t, self.clock())
        )

    def adjust_time(self, treino_id: str, segundos: int) -> Optional[Treino]:
        return self._transition(
            treino_id, lambda t: treinos_service.adjust_treino_time(t, segundos)
        )

    def set_duration(self, treino_id: str, duracao: int) -> Optional[Treino]:
        return self._transition(
            treino_id, lambda t: treinos_service.set_treino_duration(t, duracao)
        )

    # ---------- EXERCÍCIOS ----------

    def _replace_exercicios(self, treino: Treino, exercicios: List[Exercicio]) -> None:
        self._replace(treino.model_copy(update={"exercicios": exercicios}))

    def add_exercicio(self, treino_id: str, dados: ExercicioCreate) -> Optional[Exercicio]:
        with self._lock:
            treino = self.get_treino(treino_id)
            if treino is None:
                return None

            exercicio = Exercicio(**dados.model_dump())
            self._replace_exercicios(treino, treino.exercicios + [exercicio])
            self._persist(
                "criar exercício", self.repository.create_exercicio, treino_id, exercicio
            )
            return exercicio

    def update_exercicio(
        self, treino_id: str, exercicio_id: str, dados: ExercicioCreate
    ) -> Optional[Exercicio]:
        with self._lock:
            treino = self.get_treino(treino_id)
            atual = self.get_exercicio(treino_id, exercicio_id)
            if treino is None or atual is None:
                return None

            # Séries continuam as mesmas
            novo = atual.model_copy(update=dados.model_dump())
            self._replace_exercicios(
                treino, [novo if e.id == exercicio_id else e for e in treino.exercicios]
            )
            self._persist("atualizar exercício", self.repository.update_exercicio, novo)
            return novo

    def delete_exercicio(self, treino_id: str, exercicio_id: str) -> bool:
        with self._lock:
            treino = self.get_treino(treino_id)
            if treino is None or self.get_exercicio(treino_id, exercicio_id) is None:
                return False

            self._replace_exercicios(
                treino, [e for e in treino.exercicios if e.id != exercicio_id]
            )
            self._persist("remover exercício", self.repository.delete_exercicio, exercicio_id)
            return True

    # ---------- SÉRIES ----------

    def _locate(self, treino_id: str, exercicio_id: str) -> Optional[Tuple[Treino, Exercicio]]:
        treino = self.get_treino(treino_id)
        if treino is None:
            return None
        exercicio = next((e for e in treino.exercicios if e.id == exercicio_id), None)
        if exercicio is None:
            return None
        return treino, exercicio

    def _replace_series(self, treino: Treino, exercicio: Exercicio, series: List[Serie]) -> None:
        novo = exercicio.model_copy(update={"series": series})
        self._replace_exercicios(
            treino, [novo if e.id == exercicio.id else e for e in treino.exercicios]
        )

    def add_serie(self, treino_id: str, exercicio_id: str, dados: SerieCreate) -> Optional[Serie]:
        with self._lock:
            encontrado = self._locate(treino_id, exercicio_id)
            if encontrado is None:
                return None
            treino, exercicio = encontrado

            serie = Serie(**dados.model_dump(), concluida=False)
            self._replace_series(treino, exercicio, exercicio.series + [serie])
            self._persist("criar série", self.repository.create_serie, exercicio_id, serie)
            return serie

    def update_serie(
        self, treino_id: str, exercicio_id: str, serie_id: str, dados: SerieUpdate
    ) -> Optional[Serie]:
        with self._lock:
            encontrado = self._locate(treino_id, exercicio_id)
            if encontrado is None:
                return None
            treino, exercicio = encontrado
            if not any(s.id == serie_id for s in exercicio.series):
                return None

            serie = Serie(id=serie_id, **dados.model_dump())
            self._replace_series(
                treino, exercicio, [serie if s.id == serie_id else s for s in exercicio.series]
            )
            self._persist("atualizar série", self.repository.update_serie, serie)
            return serie

    def delete_serie(self, treino_id: str, exercicio_id: str, serie_id: str) -> bool:
        with self._lock:
            encontrado = self._locate(treino_id, exercicio_id)
            if encontrado is None:
                return False
            treino, exercicio = encontrado
            if not any(s.id == serie_id for s in exercicio.series):
                return False

            self._replace_series(
                treino, exercicio, [s for s in exercicio.series if s.id != serie_id]
            )
            self._persist("remover série", self.repository.delete_serie, serie_id)
            return True


def create_store(settings: Settings, clock: Clock = utc_now) -> WorkoutStore:
    """
    Monta o store de acordo com a configuração:

    - duckdb: backend relacional + backup JSON local (se LOCAL_BACKUP)
    - local: só o arquivo JSON
    Se o DuckDB não abrir, cai no modo local.
    """
    if settings.backend == "duckdb":
        backup = LocalRepository(settings.LOCAL_STORE_PATH) if settings.LOCAL_BACKUP else None
        try:
            repository = DuckDBRepository(settings.DB_PATH, settings.USER_ID)
        except PersistenciaError as exc:
            logger.warning("DuckDB indisponível - usando modo local: %s", exc)
        else:
            return WorkoutStore(repository, backup=backup, clock=clock)

    return WorkoutStore(LocalRepository(settings.LOCAL_STORE_PATH), clock=clock)
