# app/services/cronometro.py

from datetime import datetime, timezone

from app.models.treino import MAX_DURACAO, Treino


def as_utc(momento: datetime) -> datetime:
    """Datas sem fuso são tratadas como UTC."""
    if momento.tzinfo is None:
        return momento.replace(tzinfo=timezone.utc)
    return momento.astimezone(timezone.utc)


def _referencia(treino: Treino) -> datetime:
    # pausado_em guarda o último retorno enquanto o treino está rodando
    return as_utc(treino.pausado_em or treino.inicio)


def commit_elapsed(treino: Treino, agora: datetime) -> int:
    """
    Duração acumulada até `agora`.

    - concluído ou pausado: a duração gravada, congelada
    - rodando: duração gravada + segundos inteiros desde a referência
      (pausado_em se existir, senão inicio)

    O tempo vem sempre da diferença de relógio, nunca de um contador
    incrementado a cada tick.
    """
    if treino.concluido or treino.pausado:
        return treino.duracao

    delta = (as_utc(agora) - _referencia(treino)).total_seconds()
    return min(MAX_DURACAO, treino.duracao + max(0, int(delta // 1)))


def live_elapsed(treino: Treino, agora: datetime) -> int:
    """Duração para exibição; não grava nada."""
    return commit_elapsed(treino, agora)


def adjust_duration(duracao: int, delta: int) -> int:
    return min(MAX_DURACAO, max(0, duracao + delta))


def format_duration(segundos: int) -> str:
    horas, resto = divmod(max(0, segundos), 3600)
    minutos, segs = divmod(resto, 60)
    if horas > 0:
        return f"{horas:02d}:{minutos:02d}:{segs:02d}"
    return f"{minutos:02d}:{segs:02d}"


def parse_duration(texto: str) -> int:
    """
    Converte 'MM:SS' ou 'HH:MM:SS' em segundos.
    Lança ValueError para formatos inválidos.
    """
    partes = texto.strip().split(":")
    if len(partes) not in (2, 3):
        raise ValueError(f"Formato de tempo inválido: '{texto}'. Use MM:SS ou HH:MM:SS.")

    try:
        numeros = [int(p) for p in partes]
    except ValueError:
        raise ValueError(f"Formato de tempo inválido: '{texto}'.") from None

    if any(n < 0 for n in numeros):
        raise ValueError(f"Tempo negativo não é permitido: '{texto}'.")

    if len(numeros) == 2:
        total = numeros[0] * 60 + numeros[1]
    else:
        total = numeros[0] * 3600 + numeros[1] * 60 + numeros[2]

    if total > MAX_DURACAO:
        raise ValueError(f"Tempo muito grande: '{texto}'.")
    return total
