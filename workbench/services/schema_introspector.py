"""数据库结构查看服务（基于 SQLite 目录表与 PRAGMA）。

注意：表名以文本方式拼入 `PRAGMA table_info(...)`，目录查询不支持对标识符做参数绑定。
调用方只能传入 `list_tables()` 返回的表名，不能直接传入用户输入（API 层负责校验）。
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncConnection

from ..domain.errors import QueryError
from ..domain.interfaces import SchemaIntrospection
from ..domain.models import ColumnDescriptor, QueryResult, Scalar, TableDescriptor
from ..infrastructure.engine.lifecycle import EngineLifecycle
from .query_executor import fetch_result_set

LIST_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"

SCHEMA_OVERVIEW_SQL = """
SELECT
  name AS 'Table Name',
  sql AS 'Create Statement'
FROM sqlite_master
WHERE type='table' AND name NOT LIKE 'sqlite_%'
"""


async def fetch_rows(connection: AsyncConnection, sql: str) -> list[list[Scalar]]:
    """执行目录查询并返回行（无结果集视为空）。

    Raises:
        QueryError: 目录查询失败。
    """

    result_set = await fetch_result_set(connection, sql)
    if result_set is None:
        return []
    return result_set[1]


async def list_tables_on(connection: AsyncConnection) -> list[str]:
    """在已持有的连接上列出用户表（目录顺序）。"""

    return [str(row[0]) for row in await fetch_rows(connection, LIST_TABLES_SQL)]


async def describe_table_on(connection: AsyncConnection, name: str) -> list[ColumnDescriptor]:
    """在已持有的连接上读取指定表的列元数据。"""

    rows = await fetch_rows(connection, f"PRAGMA table_info({name})")
    # PRAGMA table_info: cid, name, type, notnull, dflt_value, pk
    return [
        ColumnDescriptor(
            name=str(column_name),
            declared_type=str(declared_type or ""),
            not_null=bool(not_null),
            default_value=default_value,
            is_primary_key=bool(pk),
        )
        for _cid, column_name, declared_type, not_null, default_value, pk in rows
    ]


class SchemaIntrospector(SchemaIntrospection):
    """基于 EngineLifecycle 的结构查看实现。"""

    def __init__(self, lifecycle: EngineLifecycle) -> None:
        self._lifecycle = lifecycle

    async def list_tables(self) -> list[str]:
        async with self._lifecycle.connection() as connection:
            return await list_tables_on(connection)

    async def describe_table(self, name: str) -> list[ColumnDescriptor]:
        async with self._lifecycle.connection() as connection:
            return await describe_table_on(connection, name)

    async def describe_schema(self) -> list[TableDescriptor]:
        """一次性读取全部用户表的列元数据（同一次加锁内完成，结果一致）。"""

        async with self._lifecycle.connection() as connection:
            tables = await list_tables_on(connection)
            return [
                TableDescriptor(name=table, columns=await describe_table_on(connection, table))
                for table in tables
            ]

    async def schema_overview(self) -> QueryResult:
        """表名与建表语句的结果表。"""

        async with self._lifecycle.connection() as connection:
            result_set = await fetch_result_set(connection, SCHEMA_OVERVIEW_SQL)
        if result_set is None:
            raise QueryError("目录查询未返回结果集", sql=SCHEMA_OVERVIEW_SQL)
        columns, rows = result_set
        return QueryResult(columns=columns, rows=rows)
