from datetime import timedelta

from app.models.treino import MAX_DURACAO, EstadoTreino
from app.services.treinos_service import (
    adjust_treino_time,
    complete_treino,
    estado_treino,
    novo_treino,
    pause_treino,
    resume_treino,
    set_treino_duration,
)
from conftest import INICIO


def em(segundos):
    return INICIO + timedelta(seconds=segundos)


def test_new_treino_starts_running():
    treino = novo_treino("Peito", INICIO)

    assert estado_treino(treino) is EstadoTreino.RUNNING
    assert treino.duracao == 0
    assert treino.inicio == treino.data == INICIO
    assert treino.pausado_em is None


def test_pause_resume_complete_timeline():
    treino = novo_treino("Peito", INICIO)

    treino = pause_treino(treino, em(30))
    assert estado_treino(treino) is EstadoTreino.PAUSED
    assert treino.duracao == 30
    assert treino.pausado_em == em(30)

    treino = resume_treino(treino, em(300))
    assert estado_treino(treino) is EstadoTreino.RUNNING
    assert treino.duracao == 30
    assert treino.pausado_em == em(300)

    treino = complete_treino(treino, em(320))
    assert estado_treino(treino) is EstadoTreino.COMPLETED
    assert treino.duracao == 50
    assert treino.fim == em(320)
    assert treino.pausado is False


def test_pause_then_resume_keeps_duration():
    treino = novo_treino("Costas", INICIO)

    pausado = pause_treino(treino, em(12))
    retomado = resume_treino(pausado, em(12))

    assert retomado.duracao == 12
    assert estado_treino(retomado) is EstadoTreino.RUNNING


def test_complete_while_paused_keeps_committed_duration():
    treino = pause_treino(novo_treino("Pernas", INICIO), em(40))

    concluido = complete_treino(treino, em(4000))

    assert concluido.duracao == 40
    assert concluido.concluido is True
    assert concluido.pausado is False


def test_completed_treino_ignores_every_transition():
    concluido = complete_treino(novo_treino("Ombros", INICIO), em(60))

    assert pause_treino(concluido, em(100)) is concluido
    assert resume_treino(concluido, em(100)) is concluido
    assert adjust_treino_time(concluido, 10) is concluido
    assert set_treino_duration(concluido, 999) is concluido
    assert complete_treino(concluido, em(500)) is concluido
    assert concluido.duracao == 60


def test_pause_while_paused_and_resume_while_running_are_noops():
    rodando = novo_treino("Biceps", INICIO)
    pausado = pause_treino(rodando, em(10))

    assert resume_treino(rodando, em(20)) is rodando
    assert pause_treino(pausado, em(20)) is pausado


def test_adjust_time_clamps_at_zero():
    treino = novo_treino("Triceps", INICIO).model_copy(update={"duracao": 5})

    assert adjust_treino_time(treino, -10).duracao == 0
    assert adjust_treino_time(treino, 10).duracao == 15


def test_adjust_time_keeps_state():
    pausado = pause_treino(novo_treino("Abdomen", INICIO), em(20))

    ajustado = adjust_treino_time(pausado, 10)

    assert ajustado.duracao == 30
    assert estado_treino(ajustado) is EstadoTreino.PAUSED


def test_set_duration_clamps_negative_values():
    treino = novo_treino("Gluteos", INICIO)

    assert set_treino_duration(treino, 600).duracao == 600
    assert set_treino_duration(treino, -5).duracao == 0
    assert set_treino_duration(treino, MAX_DURACAO + 1).duracao == MAX_DURACAO


def test_transitions_do_not_mutate_input():
    treino = novo_treino("Peito", INICIO)

    pause_treino(treino, em(30))

    assert treino.pausado is False
    assert treino.duracao == 0
