from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_store
from app.models.exercicio import ExercicioBiblioteca
from app.models.treino import ResumoDashboard, ResumoProgresso
from app.services.estatisticas_service import (
    dashboard_summary,
    exercise_library,
    exercise_names,
    muscle_groups,
    progress_summary,
)
from app.services.workout_store import WorkoutStore


router = APIRouter(prefix="/estatisticas", tags=["estatisticas"])


@router.get("/biblioteca", response_model=List[ExercicioBiblioteca])
def biblioteca_de_exercicios(
    busca: Optional[str] = None,
    grupo_muscular: Optional[str] = None,
    store: WorkoutStore = Depends(get_store),
):
    """
    Todos os exercícios já feitos, agrupados pelo nome (sem diferenciar
    maiúsculas), com quantas vezes aparecem.
    """
    return exercise_library(store.list_treinos(), busca, grupo_muscular)


@router.get("/grupos-musculares", response_model=List[str])
def grupos_musculares(store: WorkoutStore = Depends(get_store)):
    return muscle_groups(store.list_treinos())


@router.get("/exercicios", response_model=List[str])
def nomes_de_exercicios(store: WorkoutStore = Depends(get_store)):
    return exercise_names(store.list_treinos())


@router.get("/progresso", response_model=ResumoProgresso)
def progresso_do_exercicio(
    exercicio: str = Query(..., min_length=1),
    store: WorkoutStore = Depends(get_store),
):
    """
    Série histórica da maior carga por treino para um exercício, com a
    variação percentual entre o primeiro e o último ponto.
    """
    return progress_summary(store.list_treinos(), exercicio)


@router.get("/resumo", response_model=ResumoDashboard)
def resumo(store: WorkoutStore = Depends(get_store)):
    return dashboard_summary(store.list_treinos())
