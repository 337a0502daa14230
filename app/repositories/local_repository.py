# app/repositories/local_repository.py

from pathlib import Path
from typing import Callable, List, Sequence

from pydantic import TypeAdapter, ValidationError

from app.models.exercicio import Exercicio
from app.models.serie import Serie
from app.models.treino import Treino
from app.repositories.base import PersistenciaError, TreinoRepository

_treinos_adapter = TypeAdapter(List[Treino])


class LocalRepository(TreinoRepository):
    """
    Armazenamento local: a coleção inteira num único arquivo JSON.

    Serve como backend offline e também como cópia de segurança do
    backend relacional (ver save_snapshot).
    """

    def __init__(self, path: str):
        self.path = Path(path)

    # ---------- ARQUIVO ----------

    def load_all(self) -> List[Treino]:
        if not self.path.exists():
            return []
        try:
            return _treinos_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise PersistenciaError(f"Arquivo local inválido {self.path}: {exc}") from exc

    def save_snapshot(self, treinos: Sequence[Treino]) -> None:
        """Regrava o arquivo inteiro com a coleção informada."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_bytes(_treinos_adapter.dump_json(list(treinos), indent=2))
            tmp.replace(self.path)
        except OSError as exc:
            raise PersistenciaError(f"Não foi possível gravar {self.path}: {exc}") from exc

    def _modify(self, alterar: Callable[[List[Treino]], List[Treino]]) -> None:
        self.save_snapshot(alterar(self.load_all()))

    # ---------- TREINOS ----------

    def create_treino(self, treino: Treino) -> None:
        self._modify(lambda treinos: [treino] + treinos)

    def update_treino(self, treino: Treino) -> None:
        def alterar(treinos):
            return [
                treino.model_copy(update={"exercicios": t.exercicios}) if t.id == treino.id else t
                for t in treinos
            ]

        self._modify(alterar)

    def delete_treino(self, treino_id: str) -> None:
        self._modify(lambda treinos: [t for t in treinos if t.id != treino_id])

    # ---------- EXERCÍCIOS ----------

    def create_exercicio(self, treino_id: str, exercicio: Exercicio) -> None:
        def alterar(treinos):
            for t in treinos:
                if t.id == treino_id:
                    t.exercicios.append(exercicio)
            return treinos

        self._modify(alterar)

    def update_exercicio(self, exercicio: Exercicio) -> None:
        def alterar(treinos):
            for t in treinos:
                t.exercicios = [
                    exercicio.model_copy(update={"series": e.series}) if e.id == exercicio.id else e
                    for e in t.exercicios
                ]
            return treinos

        self._modify(alterar)

    def delete_exercicio(self, exercicio_id: str) -> None:
        def alterar(treinos):
            for t in treinos:
                t.exercicios = [e for e in t.exercicios if e.id != exercicio_id]
            return treinos

        self._modify(alterar)

    # ---------- SÉRIES ----------

    def create_serie(self, exercicio_id: str, serie: Serie) -> None:
        def alterar(treinos):
            for t in treinos:
                for e in t.exercicios:
                    if e.id == exercicio_id:
                        e.series.append(serie)
            return treinos

        self._modify(alterar)

    def update_serie(self, serie: Serie) -> None:
        def alterar(treinos):
            for t in treinos:
                for e in t.exercicios:
                    e.series = [serie if s.id == serie.id else s for s in e.series]
            return treinos

        self._modify(alterar)

    def delete_serie(self, serie_id: str) -> None:
        def alterar(treinos):
            for t in treinos:
                for e in t.exercicios:
                    e.series = [s for s in e.series if s.id != serie_id]
            return treinos

        self._modify(alterar)
