from datetime import datetime, timezone
from typing import Callable

# Fonte de tempo injetável (testes passam um relógio fixo)
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
