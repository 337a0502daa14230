from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_store
from app.models.exercicio import EstatisticasExercicio, Exercicio, ExercicioCreate
from app.models.serie import Serie, SerieCreate, SerieUpdate
from app.models.treino import (
    AjusteTempoRequest,
    DuracaoRequest,
    TempoTreino,
    Treino,
    TreinoCreate,
    TreinoUpdate,
)
from app.services.cronometro import format_duration, live_elapsed, parse_duration
from app.services.estatisticas_service import exercise_stats
from app.services.treinos_service import estado_treino
from app.services.workout_store import WorkoutStore


router = APIRouter(prefix="/treinos", tags=["treinos"])

TREINO_NAO_ENCONTRADO = "Treino não encontrado"
EXERCICIO_NAO_ENCONTRADO = "Exercício não encontrado para este treino"
SERIE_NAO_ENCONTRADA = "Série não encontrada para este exercício"


def _treino_or_404(treino: Optional[Treino]) -> Treino:
    if treino is None:
        raise HTTPException(status_code=404, detail=TREINO_NAO_ENCONTRADO)
    return treino


# ---------- TREINOS (sessão) ---------- #


@router.get("/", response_model=List[Treino])
def listar_treinos(busca: Optional[str] = None, store: WorkoutStore = Depends(get_store)):
    return store.list_treinos(busca)


@router.post("/", response_model=Treino, status_code=status.HTTP_201_CREATED)
def criar_treino(payload: TreinoCreate, store: WorkoutStore = Depends(get_store)):
    return store.add_treino(payload.nome)


@router.post("/sync", response_model=List[Treino])
def sincronizar_treinos(store: WorkoutStore = Depends(get_store)):
    """
    Relê todos os treinos do backend e sobrescreve o estado local.
    Alterações locais que não chegaram ao backend são perdidas.
    """
    return store.sync()


@router.get("/{treino_id}", response_model=Treino)
def obter_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    return _treino_or_404(store.get_treino(treino_id))


@router.put("/{treino_id}", response_model=Treino)
def atualizar_treino(
    treino_id: str,
    payload: TreinoUpdate,
    store: WorkoutStore = Depends(get_store),
):
    return _treino_or_404(store.rename_treino(treino_id, payload.nome))


@router.delete("/{treino_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    if not store.delete_treino(treino_id):
        raise HTTPException(status_code=404, detail=TREINO_NAO_ENCONTRADO)
    return


# ---------- TEMPO ---------- #


@router.get("/{treino_id}/tempo", response_model=TempoTreino)
def tempo_do_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    """
    Tempo decorrido para exibição. Recalculado a cada chamada a partir do
    relógio; nada é gravado.
    """
    treino = _treino_or_404(store.get_treino(treino_id))
    segundos = live_elapsed(treino, store.clock())
    return TempoTreino(
        treino_id=treino.id,
        estado=estado_treino(treino),
        segundos=segundos,
        formatado=format_duration(segundos),
    )


@router.post("/{treino_id}/pausar", response_model=Treino)
def pausar_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    return _treino_or_404(store.pause(treino_id))


@router.post("/{treino_id}/retomar", response_model=Treino)
def retomar_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    return _treino_or_404(store.resume(treino_id))


@router.post("/{treino_id}/concluir", response_model=Treino)
def concluir_treino(treino_id: str, store: WorkoutStore = Depends(get_store)):
    return _treino_or_404(store.complete(treino_id))


@router.post("/{treino_id}/ajustar-tempo", response_model=Treino)
def ajustar_tempo(
    treino_id: str,
    payload: AjusteTempoRequest,
    store: WorkoutStore = Depends(get_store),
):
    return _treino_or_404(store.adjust_time(treino_id, payload.segundos))


@router.put("/{treino_id}/duracao", response_model=Treino)
def definir_duracao(
    treino_id: str,
    payload: DuracaoRequest,
    store: WorkoutStore = Depends(get_store),
):
    """
    Define a duração total. Aceita segundos ('duracao') ou texto
    'MM:SS' / 'HH:MM:SS' ('texto').
    """
    if payload.duracao is not None:
        duracao = payload.duracao
    else:
        try:
            duracao = parse_duration(payload.texto)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

    return _treino_or_404(store.set_duration(treino_id, duracao))


# ---------- EXERCÍCIOS DO TREINO ---------- #


@router.post(
    "/{treino_id}/exercicios",
    response_model=Exercicio,
    status_code=status.HTTP_201_CREATED,
)
def adicionar_exercicio(
    treino_id: str,
    payload: ExercicioCreate,
    store: WorkoutStore = Depends(get_store),
):
    exercicio = store.add_exercicio(treino_id, payload)
    if exercicio is None:
        raise HTTPException(status_code=404, detail=TREINO_NAO_ENCONTRADO)
    return exercicio


@router.put("/{treino_id}/exercicios/{exercicio_id}", response_model=Exercicio)
def atualizar_exercicio(
    treino_id: str,
    exercicio_id: str,
    payload: ExercicioCreate,
    store: WorkoutStore = Depends(get_store),
):
    """
    Atualiza nome, grupo muscular e observações. As séries não mudam.
    """
    exercicio = store.update_exercicio(treino_id, exercicio_id, payload)
    if exercicio is None:
        raise HTTPException(status_code=404, detail=EXERCICIO_NAO_ENCONTRADO)
    return exercicio


@router.delete(
    "/{treino_id}/exercicios/{exercicio_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remover_exercicio(
    treino_id: str,
    exercicio_id: str,
    store: WorkoutStore = Depends(get_store),
):
    if not store.delete_exercicio(treino_id, exercicio_id):
        raise HTTPException(status_code=404, detail=EXERCICIO_NAO_ENCONTRADO)
    return


@router.get(
    "/{treino_id}/exercicios/{exercicio_id}/estatisticas",
    response_model=EstatisticasExercicio,
)
def estatisticas_do_exercicio(
    treino_id: str,
    exercicio_id: str,
    store: WorkoutStore = Depends(get_store),
):
    exercicio = store.get_exercicio(treino_id, exercicio_id)
    if exercicio is None:
        raise HTTPException(status_code=404, detail=EXERCICIO_NAO_ENCONTRADO)
    return exercise_stats(exercicio)


# ---------- SÉRIES ---------- #


@router.post(
    "/{treino_id}/exercicios/{exercicio_id}/series",
    response_model=Serie,
    status_code=status.HTTP_201_CREATED,
)
def adicionar_serie(
    treino_id: str,
    exercicio_id: str,
    payload: SerieCreate,
    store: WorkoutStore = Depends(get_store),
):
    serie = store.add_serie(treino_id, exercicio_id, payload)
    if serie is None:
        raise HTTPException(status_code=404, detail=EXERCICIO_NAO_ENCONTRADO)
    return serie


@router.put(
    "/{treino_id}/exercicios/{exercicio_id}/series/{serie_id}",
    response_model=Serie,
)
def atualizar_serie(
    treino_id: str,
    exercicio_id: str,
    serie_id: str,
    payload: SerieUpdate,
    store: WorkoutStore = Depends(get_store),
):
    serie = store.update_serie(treino_id, exercicio_id, serie_id, payload)
    if serie is None:
        raise HTTPException(status_code=404, detail=SERIE_NAO_ENCONTRADA)
    return serie


@router.delete(
    "/{treino_id}/exercicios/{exercicio_id}/series/{serie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remover_serie(
    treino_id: str,
    exercicio_id: str,
    serie_id: str,
    store: WorkoutStore = Depends(get_store),
):
    if not store.delete_serie(treino_id, exercicio_id, serie_id):
        raise HTTPException(status_code=404, detail=SERIE_NAO_ENCONTRADA)
    return
