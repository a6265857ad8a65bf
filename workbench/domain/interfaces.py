"""领域层抽象接口定义。

本模块集中定义两类接口：
1) 能力抽象：查询执行、结构查看、导出（由 `workbench/services/` 提供实现）
2) 会话抽象：API 层唯一依赖的会话管理入口

设计目标：
- API 只依赖抽象，不直接依赖 SQLAlchemy / SQLite；
- 通过接口隔离，测试中可用替身替换真实引擎。
"""

from abc import ABC, abstractmethod

from .models import ColumnDescriptor, EngineState, QueryResult, TableDescriptor


class SqlExecutor(ABC):
    """SQL 执行抽象。"""

    @abstractmethod
    async def execute(self, sql_text: str) -> QueryResult:
        """执行任意 SQL 文本并返回统一结果。

        SQL 层面的错误不会抛出，而是写入 `QueryResult.error`。

        Args:
            sql_text: 用户提交的 SQL 文本（可包含多条语句）。

        Returns:
            统一结构的执行结果。
        """


class SchemaIntrospection(ABC):
    """数据库结构查看抽象。"""

    @abstractmethod
    async def list_tables(self) -> list[str]:
        """按目录顺序列出用户表（不含引擎内部表）。"""

    @abstractmethod
    async def describe_table(self, name: str) -> list[ColumnDescriptor]:
        """获取指定表的列元数据。

        Args:
            name: 表名，必须来自 `list_tables()` 的返回值。

        Returns:
            列元数据列表；表不存在时返回空列表。
        """


class DatabaseExporter(ABC):
    """数据库导出抽象。"""

    @abstractmethod
    async def export_as_script(self) -> str:
        """将当前数据库导出为可重放的 SQL 脚本。"""


class SessionManager(SqlExecutor, SchemaIntrospection, DatabaseExporter):
    """会话管理入口（API 层依赖的唯一抽象）。"""

    @property
    @abstractmethod
    def state(self) -> EngineState:
        """当前引擎状态。"""

    @abstractmethod
    async def ensure_ready(self) -> None:
        """确保引擎已就绪。

        Raises:
            EngineInitError: 引擎初始化失败。
        """

    @abstractmethod
    async def seed_if_empty(self) -> None:
        """数据库为空时写入示例数据（幂等）。"""

    @abstractmethod
    async def reset_and_reseed(self) -> None:
        """重建空实例并重新写入示例数据。"""

    @abstractmethod
    async def describe_schema(self) -> list[TableDescriptor]:
        """获取所有用户表及其列元数据。"""

    @abstractmethod
    async def schema_overview(self) -> QueryResult:
        """以结果表形式返回表名与建表语句。"""

    @abstractmethod
    async def close(self) -> None:
        """释放引擎实例。"""
