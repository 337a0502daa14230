from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from app.models.exercicio import Exercicio
from app.models.serie import novo_id


# Limite da coluna INTEGER (32 bits) do DuckDB
MAX_DURACAO = 2**31 - 1


class EstadoTreino(str, Enum):
    RUNNING = "em_andamento"
    PAUSED = "pausado"
    COMPLETED = "concluido"


class Treino(BaseModel):
    id: str = Field(default_factory=novo_id)
    nome: str = Field(..., min_length=1, description="Nome da sessão de treino")
    data: datetime = Field(..., description="Data de criação da sessão")
    exercicios: List[Exercicio] = Field(default_factory=list)
    concluido: bool = False
    inicio: datetime = Field(..., description="Início da contagem de tempo")
    fim: Optional[datetime] = None
    duracao: int = Field(
        0, ge=0, le=MAX_DURACAO, description="Segundos ativos acumulados"
    )
    pausado: bool = False
    pausado_em: Optional[datetime] = Field(
        None, description="Última pausa (ou último retorno, quando rodando)"
    )

    @model_validator(mode="after")
    def _concluido_ignora_pausa(self):
        # Treino concluído nunca fica pausado
        if self.concluido and self.pausado:
            self.pausado = False
        return self


class TreinoCreate(BaseModel):
    nome: str = Field(..., min_length=1)


class TreinoUpdate(BaseModel):
    nome: str = Field(..., min_length=1)


class AjusteTempoRequest(BaseModel):
    segundos: int = Field(
        ..., ge=-MAX_DURACAO, le=MAX_DURACAO, description="Delta em segundos (ex: -10, +10)"
    )


class DuracaoRequest(BaseModel):
    duracao: Optional[int] = Field(
        None, ge=-MAX_DURACAO, le=MAX_DURACAO, description="Duração total em segundos"
    )
    texto: Optional[str] = Field(None, description="Duração em MM:SS ou HH:MM:SS")

    @model_validator(mode="after")
    def _um_dos_dois(self):
        if self.duracao is None and self.texto is None:
            raise ValueError("Informe 'duracao' ou 'texto'.")
        return self


class TempoTreino(BaseModel):
    treino_id: str
    estado: EstadoTreino
    segundos: int
    formatado: str


class PontoProgresso(BaseModel):
    data: datetime
    carga: float
    repeticoes: int


class ResumoProgresso(BaseModel):
    exercicio: str
    pontos: List[PontoProgresso]
    carga_inicial: Optional[float] = None
    carga_atual: Optional[float] = None
    variacao_percentual: Optional[float] = None


class ResumoDashboard(BaseModel):
    total_treinos: int
    treinos_concluidos: int
    total_exercicios: int
    total_series: int
    recentes: List[Treino]
