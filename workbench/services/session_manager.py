"""会话管理服务（业务编排）。

对外提供唯一的入口 `WorkbenchSession`，把引擎生命周期、查询执行、结构查看、
示例数据与导出组合在一起。调用方持有的是该对象的引用，而不是引擎实例本身，
因此 reset 之后不会残留对旧实例的引用。
"""

from __future__ import annotations

import logging

from ..domain.interfaces import SessionManager
from ..domain.models import ColumnDescriptor, EngineState, QueryResult, TableDescriptor
from ..infrastructure.engine.lifecycle import EngineLifecycle
from .export_serializer import ExportSerializer
from .query_executor import QueryExecutor
from .sample_data import SampleDataLoader
from .schema_introspector import SchemaIntrospector

log = logging.getLogger(__name__)


class WorkbenchSession(SessionManager):
    """SQL 工作台会话管理实现。"""

    def __init__(self, *, lifecycle: EngineLifecycle) -> None:
        """组装各子服务。

        Args:
            lifecycle: 引擎生命周期管理器（所有子服务共享同一把锁）。
        """

        self._lifecycle = lifecycle
        self._executor = QueryExecutor(lifecycle)
        self._introspector = SchemaIntrospector(lifecycle)
        self._exporter = ExportSerializer(lifecycle)
        self._sample_data = SampleDataLoader(lifecycle=lifecycle, executor=self._executor)

    @property
    def state(self) -> EngineState:
        return self._lifecycle.state

    async def ensure_ready(self) -> None:
        await self._lifecycle.ensure_ready()

    async def execute(self, sql_text: str) -> QueryResult:
        return await self._executor.execute(sql_text)

    async def seed_if_empty(self) -> None:
        await self._sample_data.seed_if_empty()

    async def reset_and_reseed(self) -> None:
        """重置为空实例并重新写入示例数据。

        Raises:
            EngineInitError: 新实例创建失败。
            QueryError: 示例数据写入失败。
        """

        await self._lifecycle.reset()
        await self._sample_data.seed_if_empty()
        log.info("数据库已重置并写入示例数据")

    async def list_tables(self) -> list[str]:
        return await self._introspector.list_tables()

    async def describe_table(self, name: str) -> list[ColumnDescriptor]:
        return await self._introspector.describe_table(name)

    async def describe_schema(self) -> list[TableDescriptor]:
        return await self._introspector.describe_schema()

    async def schema_overview(self) -> QueryResult:
        return await self._introspector.schema_overview()

    async def export_as_script(self) -> str:
        return await self._exporter.export_as_script()

    async def close(self) -> None:
        await self._lifecycle.close()
