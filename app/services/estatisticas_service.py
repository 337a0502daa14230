# app/services/estatisticas_service.py

from typing import Dict, List, Optional, Sequence

from app.models.exercicio import (
    EstatisticasExercicio,
    Exercicio,
    ExercicioBiblioteca,
)
from app.models.treino import (
    PontoProgresso,
    ResumoDashboard,
    ResumoProgresso,
    Treino,
)


# ---------- POR EXERCÍCIO ----------


def exercise_stats(exercicio: Exercicio) -> EstatisticasExercicio:
    """
    Média de carga (1 casa decimal) e de repetições (inteiro mais próximo).
    Exercício sem séries devolve zeros.
    """
    series = exercicio.series
    if not series:
        return EstatisticasExercicio()

    total_carga = sum(s.carga for s in series)
    total_reps = sum(s.repeticoes for s in series)

    return EstatisticasExercicio(
        media_carga=round(total_carga / len(series), 1),
        # round() do Python arredonda .5 para o par; aqui .5 sobe
        media_repeticoes=int(total_reps / len(series) + 0.5),
        total_series=len(series),
    )


# ---------- BIBLIOTECA ----------


def exercise_library(
    treinos: Sequence[Treino],
    busca: Optional[str] = None,
    grupo_muscular: Optional[str] = None,
) -> List[ExercicioBiblioteca]:
    """
    Agrupa os exercícios de todos os treinos pelo nome (sem diferenciar
    maiúsculas). Mantém a primeira grafia e o primeiro grupo muscular vistos.
    """
    biblioteca: Dict[str, ExercicioBiblioteca] = {}

    for treino in treinos:
        for exercicio in treino.exercicios:
            chave = exercicio.nome.lower()
            if chave in biblioteca:
                biblioteca[chave].contagem += 1
            else:
                biblioteca[chave] = ExercicioBiblioteca(
                    nome=exercicio.nome,
                    grupo_muscular=exercicio.grupo_muscular,
                    contagem=1,
                )

    resultado = list(biblioteca.values())

    if busca:
        termo = busca.lower()
        resultado = [e for e in resultado if termo in e.nome.lower()]
    if grupo_muscular:
        resultado = [e for e in resultado if e.grupo_muscular == grupo_muscular]

    return resultado


def muscle_groups(treinos: Sequence[Treino]) -> List[str]:
    return sorted({e.grupo_muscular for e in exercise_library(treinos)})


def exercise_names(treinos: Sequence[Treino]) -> List[str]:
    return sorted({e.nome for t in treinos for e in t.exercicios})


# ---------- PROGRESSO ----------


def progress_series(treinos: Sequence[Treino], nome: str) -> List[PontoProgresso]:
    """
    Um ponto por treino (em ordem crescente de data): a série de maior carga
    do exercício `nome` naquele treino.
    """
    pontos: List[PontoProgresso] = []

    for treino in sorted(treinos, key=lambda t: t.data):
        exercicio = next((e for e in treino.exercicios if e.nome == nome), None)
        if exercicio is None or not exercicio.series:
            continue

        # max() devolve a primeira série em caso de empate
        melhor = max(exercicio.series, key=lambda s: s.carga)
        pontos.append(
            PontoProgresso(
                data=treino.data,
                carga=melhor.carga,
                repeticoes=melhor.repeticoes,
            )
        )

    return pontos


def progress_change(pontos: Sequence[PontoProgresso]) -> Optional[float]:
    """Variação percentual entre o primeiro e o último ponto."""
    if not pontos or pontos[0].carga == 0:
        return None

    inicial = pontos[0].carga
    atual = pontos[-1].carga
    return round((atual - inicial) / inicial * 100, 1)


def progress_summary(treinos: Sequence[Treino], nome: str) -> ResumoProgresso:
    pontos = progress_series(treinos, nome)
    return ResumoProgresso(
        exercicio=nome,
        pontos=pontos,
        carga_inicial=pontos[0].carga if pontos else None,
        carga_atual=pontos[-1].carga if pontos else None,
        variacao_percentual=progress_change(pontos),
    )


# ---------- TREINOS ----------


def search_treinos(treinos: Sequence[Treino], busca: Optional[str]) -> List[Treino]:
    if not busca:
        return list(treinos)
    termo = busca.lower()
    return [t for t in treinos if termo in t.nome.lower()]


def dashboard_summary(treinos: Sequence[Treino], recentes: int = 3) -> ResumoDashboard:
    return ResumoDashboard(
        total_treinos=len(treinos),
        treinos_concluidos=sum(1 for t in treinos if t.concluido),
        total_exercicios=sum(len(t.exercicios) for t in treinos),
        total_series=sum(len(e.series) for t in treinos for e in t.exercicios),
        recentes=sorted(treinos, key=lambda t: t.data, reverse=True)[:recentes],
    )
