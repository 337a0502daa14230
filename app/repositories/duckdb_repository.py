# app/repositories/duckdb_repository.py

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

import duckdb

from app.core.db import connect, get_cursor, init_db
from app.models.exercicio import Exercicio
from app.models.serie import Serie
from app.models.treino import Treino
from app.repositories.base import PersistenciaError, TreinoRepository

logger = logging.getLogger(__name__)

# Filhos de treinos do usuário atual (o parâmetro é o user_id)
_EXERCICIOS_DO_USUARIO = (
    "SELECT e.id FROM exercicios e JOIN treinos t ON t.id = e.treino_id WHERE t.user_id = ?"
)
_TREINOS_DO_USUARIO = "SELECT id FROM treinos WHERE user_id = ?"


def _to_db(momento: Optional[datetime]) -> Optional[datetime]:
    # Gravamos TIMESTAMP sem fuso, sempre em UTC
    if momento is None:
        return None
    if momento.tzinfo is not None:
        momento = momento.astimezone(timezone.utc)
    return momento.replace(tzinfo=None)


def _from_db(momento: Optional[datetime]) -> Optional[datetime]:
    if momento is None:
        return None
    return momento.replace(tzinfo=timezone.utc)


class DuckDBRepository(TreinoRepository):
    """
    Backend relacional: tabelas treinos / exercicios / series,
    com as linhas de treinos separadas por user_id.
    """

    def __init__(self, db_path: str, user_id: str):
        self.db_path = db_path
        self.user_id = user_id
        try:
            self._conn = connect(db_path)
            init_db(self._conn)
        except duckdb.Error as exc:
            raise PersistenciaError(f"Não foi possível abrir {db_path}: {exc}") from exc

    @contextmanager
    def _cursor(self):
        try:
            with get_cursor(self._conn) as cursor:
                yield cursor
        except duckdb.Error as exc:
            raise PersistenciaError(str(exc)) from exc

    # ---------- LEITURA ----------

    def load_all(self) -> List[Treino]:
        with self._cursor() as cursor:
            cursor.execute(
                """
                SELECT id, nome, data, concluido, inicio, fim, duracao, pausado, pausado_em
                FROM treinos
                WHERE user_id = ?
                ORDER BY data DESC, id;
                """,
                [self.user_id],
            )
            treino_rows = cursor.fetchall()

            cursor.execute(
                """
                SELECT e.id, e.treino_id, e.nome, e.grupo_muscular, e.observacoes
                FROM exercicios e
                JOIN treinos t ON t.id = e.treino_id
                WHERE t.user_id = ?
                ORDER BY e.ordem, e.id;
                """,
                [self.user_id],
            )
            exercicio_rows = cursor.fetchall()

            cursor.execute(
                """
                SELECT s.id, s.exercicio_id, s.carga, s.repeticoes, s.concluida, s.observacoes
                FROM series s
                JOIN exercicios e ON e.id = s.exercicio_id
                JOIN treinos t ON t.id = e.treino_id
                WHERE t.user_id = ?
                ORDER BY s.ordem, s.id;
                """,
                [self.user_id],
            )
            serie_rows = cursor.fetchall()

        series_por_exercicio: Dict[str, List[Serie]] = {}
        for row in serie_rows:
            series_por_exercicio.setdefault(row[1], []).append(
                Serie(
                    id=row[0],
                    carga=row[2],
                    repeticoes=row[3],
                    concluida=row[4],
                    observacoes=row[5],
                )
            )

        exercicios_por_treino: Dict[str, List[Exercicio]] = {}
        for row in exercicio_rows:
            exercicios_por_treino.setdefault(row[1], []).append(
                Exercicio(
                    id=row[0],
                    nome=row[2],
                    grupo_muscular=row[3],
                    observacoes=row[4],
                    series=series_por_exercicio.get(row[0], []),
                )
            )

        return [
            Treino(
                id=row[0],
                nome=row[1],
                data=_from_db(row[2]),
                concluido=row[3],
                inicio=_from_db(row[4]),
                fim=_from_db(row[5]),
                duracao=row[6],
                pausado=row[7],
                pausado_em=_from_db(row[8]),
                exercicios=exercicios_por_treino.get(row[0], []),
            )
            for row in treino_rows
        ]

    # ---------- TREINOS ----------

    def create_treino(self, treino: Treino) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO treinos (
                    id, user_id, nome, data, concluido, inicio, fim, duracao, pausado, pausado_em
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                [
                    treino.id,
                    self.user_id,
                    treino.nome,
                    _to_db(treino.data),
                    treino.concluido,
                    _to_db(treino.inicio),
                    _to_db(treino.fim),
                    treino.duracao,
                    treino.pausado,
                    _to_db(treino.pausado_em),
                ],
            )
            for exercicio in treino.exercicios:
                self._insert_exercicio(cursor, treino.id, exercicio)

    def update_treino(self, treino: Treino) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE treinos
                SET
                    nome = ?,
                    data = ?,
                    concluido = ?,
                    inicio = ?,
                    fim = ?,
                    duracao = ?,
                    pausado = ?,
                    pausado_em = ?
                WHERE id = ? AND user_id = ?;
                """,
                [
                    treino.nome,
                    _to_db(treino.data),
                    treino.concluido,
                    _to_db(treino.inicio),
                    _to_db(treino.fim),
                    treino.duracao,
                    treino.pausado,
                    _to_db(treino.pausado_em),
                    treino.id,
                    self.user_id,
                ],
            )

    def delete_treino(self, treino_id: str) -> None:
        with self._cursor() as cursor:
            # Primeiro apagamos séries e exercícios vinculados
            cursor.execute(
                """
                DELETE FROM series
                WHERE exercicio_id IN (
                    SELECT e.id FROM exercicios e
                    JOIN treinos t ON t.id = e.treino_id
                    WHERE e.treino_id = ? AND t.user_id = ?
                );
                """,
                [treino_id, self.user_id],
            )
            cursor.execute(
                f"DELETE FROM exercicios WHERE treino_id = ? AND treino_id IN ({_TREINOS_DO_USUARIO});",
                [treino_id, self.user_id],
            )
            cursor.execute(
                "DELETE FROM treinos WHERE id = ? AND user_id = ?;",
                [treino_id, self.user_id],
            )

    # ---------- EXERCÍCIOS ----------

    def _insert_exercicio(self, cursor, treino_id: str, exercicio: Exercicio) -> None:
        cursor.execute(
            "SELECT COALESCE(MAX(ordem), 0) FROM exercicios WHERE treino_id = ?;",
            [treino_id],
        )
        nova_ordem = cursor.fetchone()[0] + 1

        cursor.execute(
            """
            INSERT INTO exercicios (id, treino_id, nome, grupo_muscular, observacoes, ordem)
            VALUES (?, ?, ?, ?, ?, ?);
            """,
            [
                exercicio.id,
                treino_id,
                exercicio.nome,
                exercicio.grupo_muscular,
                exercicio.observacoes,
                nova_ordem,
            ],
        )
        for serie in exercicio.series:
            self._insert_serie(cursor, exercicio.id, serie)

    def create_exercicio(self, treino_id: str, exercicio: Exercicio) -> None:
        with self._cursor() as cursor:
            self._insert_exercicio(cursor, treino_id, exercicio)

    def update_exercicio(self, exercicio: Exercicio) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE exercicios
                SET nome = ?, grupo_muscular = ?, observacoes = ?
                WHERE id = ?
                  AND treino_id IN (SELECT id FROM treinos WHERE user_id = ?);
                """,
                [
                    exercicio.nome,
                    exercicio.grupo_muscular,
                    exercicio.observacoes,
                    exercicio.id,
                    self.user_id,
                ],
            )

    def delete_exercicio(self, exercicio_id: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                f"DELETE FROM series WHERE exercicio_id = ? AND exercicio_id IN ({_EXERCICIOS_DO_USUARIO});",
                [exercicio_id, self.user_id],
            )
            cursor.execute(
                f"DELETE FROM exercicios WHERE id = ? AND treino_id IN ({_TREINOS_DO_USUARIO});",
                [exercicio_id, self.user_id],
            )

    # ---------- SÉRIES ----------

    def _insert_serie(self, cursor, exercicio_id: str, serie: Serie) -> None:
        cursor.execute(
            "SELECT COALESCE(MAX(ordem), 0) FROM series WHERE exercicio_id = ?;",
            [exercicio_id],
        )
        nova_ordem = cursor.fetchone()[0] + 1

        cursor.execute(
            """
            INSERT INTO series (id, exercicio_id, carga, repeticoes, concluida, observacoes, ordem)
            VALUES (?, ?, ?, ?, ?, ?, ?);
            """,
            [
                serie.id,
                exercicio_id,
                serie.carga,
                serie.repeticoes,
                serie.concluida,
                serie.observacoes,
                nova_ordem,
            ],
        )

    def create_serie(self, exercicio_id: str, serie: Serie) -> None:
        with self._cursor() as cursor:
            self._insert_serie(cursor, exercicio_id, serie)

    def update_serie(self, serie: Serie) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE series
                SET carga = ?, repeticoes = ?, concluida = ?, observacoes = ?
                WHERE id = ?
                  AND exercicio_id IN (
                      SELECT e.id FROM exercicios e
                      JOIN treinos t ON t.id = e.treino_id
                      WHERE t.user_id = ?
                  );
                """,
                [
                    serie.carga,
                    serie.repeticoes,
                    serie.concluida,
                    serie.observacoes,
                    serie.id,
                    self.user_id,
                ],
            )

    def delete_serie(self, serie_id: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                f"DELETE FROM series WHERE id = ? AND exercicio_id IN ({_EXERCICIOS_DO_USUARIO});",
                [serie_id, self.user_id],
            )

    def close(self) -> None:
        try:
            self._conn.close()
        except duckdb.Error:
            logger.exception("Erro ao fechar conexão com %s", self.db_path)
