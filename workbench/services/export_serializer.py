"""数据库导出服务：生成可重放的 SQL 脚本。

脚本格式（按 `list_tables()` 的目录顺序逐表输出）：

    <目录中保存的建表语句>;
    <空行>
    INSERT INTO <表名> VALUES (<字面量>, ...);   -- 每行一条，按存储顺序
    <空行>

字面量规则：NULL；文本用单引号包裹且内部单引号加倍；数值不加引号；二进制为 X'<hex>'；
不是合法 UTF-8 的文本写成 CAST(X'<hex>' AS TEXT)，原样保留字节与存储类型。
表名直接来自引擎目录，不做转义；读取数据时列名按双引号标识符转义。
"""

from __future__ import annotations

import logging
import math

from ..domain.interfaces import DatabaseExporter
from ..domain.models import Scalar
from ..infrastructure.engine.lifecycle import EngineLifecycle
from .schema_introspector import describe_table_on, fetch_rows, list_tables_on

log = logging.getLogger(__name__)


def render_literal(value: Scalar) -> str:
    """将单元格取值渲染为 SQLite 字面量。"""

    if value is None:
        return "NULL"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "X'" + bytes(value).hex().upper() + "'"
    if isinstance(value, float):
        if math.isinf(value):
            return "9e999" if value > 0 else "-9e999"
        return repr(value)
    if isinstance(value, int):
        return str(int(value))
    raise TypeError(f"无法导出的取值类型: {type(value).__name__}")


def render_cell(storage_class: str, value: Scalar) -> str:
    """按存储类型渲染单元格；文本以原始字节读出，解码失败时保留字节。"""

    if storage_class == "text" and isinstance(value, bytes):
        try:
            return render_literal(value.decode("utf-8"))
        except UnicodeDecodeError:
            return f"CAST({render_literal(value)} AS TEXT)"
    return render_literal(value)


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def data_query(table: str, columns: list[str]) -> str:
    """逐列读取 (存储类型, 取值)，TEXT 取值转成 BLOB 以拿到原始字节。"""

    if not columns:
        return f"SELECT * FROM {table}"
    selected: list[str] = []
    for column in columns:
        quoted = quote_identifier(column)
        selected.append(f"typeof({quoted})")
        selected.append(f"CASE WHEN typeof({quoted})='text' THEN CAST({quoted} AS BLOB) ELSE {quoted} END")
    return f"SELECT {', '.join(selected)} FROM {table}"


def render_row(row: list[Scalar], typed: bool) -> list[str]:
    if not typed:
        return [render_literal(value) for value in row]
    return [render_cell(str(row[i]), row[i + 1]) for i in range(0, len(row), 2)]


def render_insert(table: str, literals: list[str]) -> str:
    values = ", ".join(literals)
    return f"INSERT INTO {table} VALUES ({values});"


class ExportSerializer(DatabaseExporter):
    """基于 EngineLifecycle 的导出实现。"""

    def __init__(self, lifecycle: EngineLifecycle) -> None:
        self._lifecycle = lifecycle

    async def export_as_script(self) -> str:
        """导出当前数据库（整个过程持有连接，得到一致的快照）。

        Raises:
            EngineInitError: 引擎初始化失败。
            QueryError: 目录或数据读取失败。
        """

        parts: list[str] = []
        async with self._lifecycle.connection() as connection:
            tables = await list_tables_on(connection)
            for table in tables:
                ddl_sql = f"SELECT sql FROM sqlite_master WHERE type='table' AND name='{table}'"
                ddl_rows = await fetch_rows(connection, ddl_sql)
                if ddl_rows:
                    parts.append(f"{ddl_rows[0][0]};\n\n")

                columns = [column.name for column in await describe_table_on(connection, table)]
                data_sql = data_query(table, columns)
                for row in await fetch_rows(connection, data_sql):
                    parts.append(render_insert(table, render_row(row, bool(columns))) + "\n")

                parts.append("\n")

        script = "".join(parts)
        log.info("数据库导出完成: tables=%s, bytes=%s", len(tables), len(script))
        return script
