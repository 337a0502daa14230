from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.serie import Serie, novo_id


# Grupos recomendados; o campo continua aceitando texto livre
GRUPOS_MUSCULARES = (
    "peito",
    "costas",
    "pernas",
    "ombros",
    "biceps",
    "triceps",
    "abdomen",
    "gluteos",
    "outros",
)


class Exercicio(BaseModel):
    id: str = Field(default_factory=novo_id)
    nome: str = Field(..., min_length=1, description="Nome do exercício")
    grupo_muscular: str = Field(
        "outros", description="Ex: peito, costas, pernas, biceps"
    )
    observacoes: Optional[str] = None
    series: List[Serie] = Field(default_factory=list)


class ExercicioCreate(BaseModel):
    nome: str = Field(..., min_length=1)
    grupo_muscular: str = "outros"
    observacoes: Optional[str] = None


class EstatisticasExercicio(BaseModel):
    media_carga: float = 0.0
    media_repeticoes: int = 0
    total_series: int = 0


class ExercicioBiblioteca(BaseModel):
    nome: str
    grupo_muscular: str
    contagem: int = Field(..., ge=1, description="Em quantos treinos aparece")
