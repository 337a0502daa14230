from contextlib import contextmanager
from pathlib import Path
import duckdb


def connect(db_path: str) -> duckdb.DuckDBPyConnection:
    """
    Abre o arquivo do DuckDB, criando a pasta se preciso.
    ':memory:' abre um banco em memória.
    """
    if db_path != ":memory:":
        path = Path(db_path).resolve()
        # DuckDB recebe caminho como string, mas criamos pasta via Path
        path.parent.mkdir(parents=True, exist_ok=True)
        db_path = str(path)
    return duckdb.connect(db_path)


def init_db(conn: duckdb.DuckDBPyConnection) -> None:
    cursor = conn.cursor()

    # Tabela de treinos (sessão)
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS treinos (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            nome TEXT NOT NULL,
            data TIMESTAMP NOT NULL,
            concluido BOOLEAN NOT NULL DEFAULT FALSE,
            inicio TIMESTAMP NOT NULL,
            fim TIMESTAMP,
            duracao INTEGER NOT NULL DEFAULT 0,
            pausado BOOLEAN NOT NULL DEFAULT FALSE,
            pausado_em TIMESTAMP,
            CONSTRAINT chk_treinos_duracao CHECK (duracao >= 0)
        );
        """
    )

    # Exercícios de cada treino
    # Sem FOREIGN KEY: a remoção em cascata é feita pelo repositório
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS exercicios (
            id TEXT PRIMARY KEY,
            treino_id TEXT NOT NULL,
            nome TEXT NOT NULL,
            grupo_muscular TEXT NOT NULL,
            observacoes TEXT,
            ordem INTEGER DEFAULT 0
        );
        """
    )

    # Séries de cada exercício
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS series (
            id TEXT PRIMARY KEY,
            exercicio_id TEXT NOT NULL,
            carga DOUBLE NOT NULL,
            repeticoes INTEGER NOT NULL,
            concluida BOOLEAN NOT NULL DEFAULT FALSE,
            observacoes TEXT,
            ordem INTEGER DEFAULT 0,
            CONSTRAINT chk_series_carga CHECK (carga >= 0),
            CONSTRAINT chk_series_repeticoes CHECK (repeticoes >= 1)
        );
        """
    )

    conn.commit()
    cursor.close()


@contextmanager
def get_cursor(conn: duckdb.DuckDBPyConnection):
    """
    Context manager que fornece um cursor a partir da conexão.

    Uso:
        with get_cursor(conn) as cursor:
            cursor.execute("...")
    """
    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    finally:
        cursor.close()
