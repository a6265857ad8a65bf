"""SQL 查询执行服务。

负责把任意 SQL 文本交给嵌入式引擎执行，并把三类结果统一成 `QueryResult`：
- 没有语句返回结果集（DDL、INSERT/UPDATE/DELETE）：空的成功结果；
- 有结果集：只保留第一个结果集，后续语句照常执行但结果被丢弃；
- SQL 错误：停止执行，错误信息原样写入 `error`，不向调用方抛出。

本层不提供事务语义：多语句中途失败时，已执行语句的效果保留（与引擎一致）。
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from ..domain.errors import EngineInitError, QueryError
from ..domain.interfaces import SqlExecutor
from ..domain.models import QueryResult, Scalar
from ..infrastructure.engine.lifecycle import EngineLifecycle
from ..infrastructure.engine.statements import split_statements

log = logging.getLogger(__name__)


def engine_error_message(exc: SQLAlchemyError) -> str:
    """提取引擎原始错误信息（去掉 SQLAlchemy 的包装文本）。"""

    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


async def fetch_result_set(
    connection: AsyncConnection, statement: str
) -> tuple[list[str], list[list[Scalar]]] | None:
    """执行单条语句。

    Returns:
        语句产生结果集时返回 (columns, rows)，否则返回 None。

    Raises:
        QueryError: 引擎报告的 SQL 错误，或驱动无法编码的 SQL 文本。
    """

    try:
        result = await connection.exec_driver_sql(statement)
    except SQLAlchemyError as exc:
        raise QueryError(engine_error_message(exc), sql=statement) from exc
    except ValueError as exc:
        # 驱动在编码阶段拒绝的文本（如孤立代理字符）不会被 SQLAlchemy 包装
        raise QueryError(str(exc), sql=statement) from exc

    if not result.returns_rows:
        return None
    columns = [str(key) for key in result.keys()]
    rows = [list(row) for row in result.fetchall()]
    return columns, rows


class QueryExecutor(SqlExecutor):
    """基于 EngineLifecycle 的查询执行实现。"""

    def __init__(self, lifecycle: EngineLifecycle) -> None:
        self._lifecycle = lifecycle

    async def execute(self, sql_text: str) -> QueryResult:
        """执行 SQL 文本（独占连接）。"""

        try:
            async with self._lifecycle.connection() as connection:
                return await self.run(connection, sql_text)
        except EngineInitError as exc:
            return QueryResult.failure(str(exc))

    async def run(self, connection: AsyncConnection, sql_text: str) -> QueryResult:
        """在调用方已持有的连接上执行 SQL 文本。"""

        try:
            statements = split_statements(sql_text)
        except ValueError as exc:
            log.info("SQL 文本无法编码: %s", exc)
            return QueryResult.failure(str(exc))

        first: tuple[list[str], list[list[Scalar]]] | None = None
        for statement in statements:
            try:
                result_set = await fetch_result_set(connection, statement)
            except QueryError as exc:
                log.info("SQL 执行出错: %s", exc.message)
                return QueryResult.failure(exc.message)
            if first is None and result_set is not None:
                first = result_set

        if first is None:
            return QueryResult.empty()
        columns, rows = first
        return QueryResult(columns=columns, rows=rows)
