"""嵌入式引擎实例的生命周期管理。

状态机：
- UNINITIALIZED -> INITIALIZING -> READY（首次访问时惰性创建）
- READY -> INITIALIZING -> READY（reset：释放旧实例并创建新的空实例）

并发约定：
1) 同一时刻只存在一个引擎实例；
2) 并发的初始化请求共享同一个初始化任务，成功或失败都会广播给所有等待者；
3) 所有触达实例的操作（执行、结构查看、导出、示例数据、reset）都经过同一把锁串行化。
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from ...domain.errors import EngineInitError, ResetError
from ...domain.models import EngineState

log = logging.getLogger(__name__)


class EngineLifecycle:
    """持有唯一的引擎实例并管理其状态。"""

    def __init__(self, engine_factory: Callable[[], AsyncEngine]) -> None:
        """初始化生命周期管理器（不会立即创建引擎）。

        Args:
            engine_factory: 每次调用返回一个全新的 AsyncEngine。
        """
        self._engine_factory = engine_factory
        self._lock = asyncio.Lock()
        self._state = EngineState.UNINITIALIZED
        self._engine: AsyncEngine | None = None
        self._connection: AsyncConnection | None = None
        self._init_task: asyncio.Task[None] | None = None
        self._generation = 0

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def generation(self) -> int:
        """实例代数：每创建一个新实例加一，用于让“已写入示例数据”之类的记忆失效。"""
        return self._generation

    async def ensure_ready(self) -> None:
        """确保引擎已就绪。

        Raises:
            EngineInitError: 引擎创建失败；状态回到 UNINITIALIZED，后续调用可重试。
        """

        if self._state is EngineState.READY:
            return

        task = self._init_task
        if task is None:
            self._state = EngineState.INITIALIZING
            task = asyncio.create_task(self._initialize())
            self._init_task = task
        # shield：单个等待者被取消时不影响其他等待者共享的初始化任务
        await asyncio.shield(task)

    async def _initialize(self) -> None:
        try:
            async with self._lock:
                # reset 可能已经抢先完成了实例创建
                if self._connection is not None:
                    self._state = EngineState.READY
                    return
                await self._build_locked()
        finally:
            self._init_task = None

    async def _build_locked(self) -> None:
        """创建新实例（调用方必须持有锁）。"""

        self._state = EngineState.INITIALIZING
        log.info("正在初始化嵌入式数据库引擎...")
        engine: AsyncEngine | None = None
        try:
            engine = self._engine_factory()
            connection = await engine.connect()
            await connection.exec_driver_sql("SELECT 1")
        except Exception as exc:
            self._state = EngineState.UNINITIALIZED
            if engine is not None:
                try:
                    await engine.dispose()
                except Exception:
                    log.debug("初始化失败后释放 Engine 出错", exc_info=True)
            log.error("嵌入式数据库引擎初始化失败: %s", exc, exc_info=True)
            raise EngineInitError(f"数据库引擎初始化失败: {exc}") from exc

        self._engine = engine
        self._connection = connection
        self._generation += 1
        self._state = EngineState.READY
        log.info("嵌入式数据库引擎已就绪 (generation=%s)", self._generation)

    async def _release_locked(self) -> None:
        """释放当前实例（调用方必须持有锁）。

        Raises:
            ResetError: 关闭连接或释放 Engine 失败。
        """

        connection, engine = self._connection, self._engine
        self._connection = None
        self._engine = None
        if engine is None:
            return
        try:
            if connection is not None:
                await connection.close()
            await engine.dispose()
        except Exception as exc:
            raise ResetError(f"释放旧引擎实例失败: {exc}") from exc

    async def reset(self) -> None:
        """释放当前实例并创建新的空实例。

        旧实例释放失败只记录日志；新实例创建失败时抛出 EngineInitError。
        """

        async with self._lock:
            try:
                await self._release_locked()
            except ResetError as exc:
                log.warning("%s（忽略，继续创建新实例）", exc, exc_info=True)
            await self._build_locked()
        log.info("数据库已重置")

    async def close(self) -> None:
        """释放实例并回到 UNINITIALIZED。"""

        async with self._lock:
            try:
                await self._release_locked()
            except ResetError as exc:
                log.warning("%s", exc, exc_info=True)
            self._state = EngineState.UNINITIALIZED

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """独占当前实例的连接。

        连接只在该上下文内有效；调用方不得在上下文之外缓存它（reset 后即失效）。

        Raises:
            EngineInitError: 引擎初始化失败，或在等待锁期间实例已失效。
        """

        await self.ensure_ready()
        async with self._lock:
            if self._connection is None:
                raise EngineInitError("数据库引擎未就绪")
            yield self._connection
