# app/services/treinos_service.py

import logging
from datetime import datetime

from app.models.treino import MAX_DURACAO, EstadoTreino, Treino
from app.services.cronometro import adjust_duration, commit_elapsed

logger = logging.getLogger(__name__)


# ---------- ESTADO ----------


def estado_treino(treino: Treino) -> EstadoTreino:
    if treino.concluido:
        return EstadoTreino.COMPLETED
    if treino.pausado:
        return EstadoTreino.PAUSED
    return EstadoTreino.RUNNING


def novo_treino(nome: str, agora: datetime) -> Treino:
    """Treino começa rodando, com duração zero."""
    return Treino(nome=nome, data=agora, inicio=agora, duracao=0)


# ---------- TRANSIÇÕES ----------
#
# Todas devolvem uma cópia atualizada do treino. Quando a transição não se
# aplica ao estado atual, devolvem o MESMO objeto (no-op), e quem chama
# usa `resultado is treino` para não persistir nada.


def pause_treino(treino: Treino, agora: datetime) -> Treino:
    if estado_treino(treino) is not EstadoTreino.RUNNING:
        return treino

    # Consolida o tempo rodando ANTES de mexer em pausado/pausado_em
    duracao = commit_elapsed(treino, agora)
    logger.debug("Treino %s pausado com %ss", treino.id, duracao)
    return treino.model_copy(
        update={"duracao": duracao, "pausado": True, "pausado_em": agora}
    )


def resume_treino(treino: Treino, agora: datetime) -> Treino:
    if estado_treino(treino) is not EstadoTreino.PAUSED:
        return treino

    logger.debug("Treino %s retomado", treino.id)
    return treino.model_copy(update={"pausado": False, "pausado_em": agora})


def complete_treino(treino: Treino, agora: datetime) -> Treino:
    if estado_treino(treino) is EstadoTreino.COMPLETED:
        return treino

    duracao = commit_elapsed(treino, agora)
    logger.debug("Treino %s concluído com %ss", treino.id, duracao)
    return treino.model_copy(
        update={
            "duracao": duracao,
            "concluido": True,
            "fim": agora,
            "pausado": False,
        }
    )


def adjust_treino_time(treino: Treino, segundos: int) -> Treino:
    """Ajuste manual (ex: -10s / +10s). Nunca fica negativo."""
    if estado_treino(treino) is EstadoTreino.COMPLETED:
        return treino

    return treino.model_copy(
        update={"duracao": adjust_duration(treino.duracao, segundos)}
    )


def set_treino_duration(treino: Treino, duracao: int) -> Treino:
    if estado_treino(treino) is EstadoTreino.COMPLETED:
        return treino

    return treino.model_copy(update={"duracao": min(MAX_DURACAO, max(0, duracao))})
