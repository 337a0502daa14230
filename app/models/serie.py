from typing import Optional
from uuid import uuid4
from pydantic import BaseModel, Field


def novo_id() -> str:
    return str(uuid4())


class Serie(BaseModel):
    id: str = Field(default_factory=novo_id)
    carga: float = Field(..., ge=0, description="Carga usada em kg")
    repeticoes: int = Field(..., ge=1, description="Repetições da série")
    concluida: bool = False
    observacoes: Optional[str] = None


class SerieCreate(BaseModel):
    carga: float = Field(..., ge=0)
    repeticoes: int = Field(..., ge=1)
    observacoes: Optional[str] = None


class SerieUpdate(BaseModel):
    carga: float = Field(..., ge=0)
    repeticoes: int = Field(..., ge=1)
    concluida: bool = False
    observacoes: Optional[str] = None
