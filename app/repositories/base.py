from abc import ABC, abstractmethod
from typing import List

from app.models.exercicio import Exercicio
from app.models.serie import Serie
from app.models.treino import Treino


class PersistenciaError(Exception):
    """Falha de leitura/escrita no backend de persistência."""


class TreinoRepository(ABC):
    """
    Contrato de persistência da árvore treino -> exercício -> série.
    Implementações convertem qualquer falha do driver em PersistenciaError.
    """

    @abstractmethod
    def load_all(self) -> List[Treino]:
        ...

    @abstractmethod
    def create_treino(self, treino: Treino) -> None:
        ...

    @abstractmethod
    def update_treino(self, treino: Treino) -> None:
        """Atualiza só os campos do treino (não mexe nos exercícios)."""

    @abstractmethod
    def delete_treino(self, treino_id: str) -> None:
        ...

    @abstractmethod
    def create_exercicio(self, treino_id: str, exercicio: Exercicio) -> None:
        ...

    @abstractmethod
    def update_exercicio(self, exercicio: Exercicio) -> None:
        ...

    @abstractmethod
    def delete_exercicio(self, exercicio_id: str) -> None:
        ...

    @abstractmethod
    def create_serie(self, exercicio_id: str, serie: Serie) -> None:
        ...

    @abstractmethod
    def update_serie(self, serie: Serie) -> None:
        ...

    @abstractmethod
    def delete_serie(self, serie_id: str) -> None:
        ...

    def close(self) -> None:
        pass
