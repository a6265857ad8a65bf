"""引擎生命周期（初始化去重、失败重试、reset）单元测试。"""

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from workbench.domain.errors import EngineInitError
from workbench.domain.models import EngineState
from workbench.infrastructure.engine import EngineLifecycle, create_workbench_engine

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class CountingEngineFactory:
    """记录调用次数的 Engine 工厂，可指定前若干次调用失败。"""

    def __init__(self, *, failures: int = 0) -> None:
        self.calls = 0
        self._failures = failures

    def __call__(self) -> AsyncEngine:
        self.calls += 1
        if self.calls <= self._failures:
            raise RuntimeError("bootstrap resource unavailable")
        return create_workbench_engine(MEMORY_URL, echo=False)


@pytest_asyncio.fixture
async def factory() -> CountingEngineFactory:
    return CountingEngineFactory()


@pytest_asyncio.fixture
async def lifecycle(factory: CountingEngineFactory) -> EngineLifecycle:
    """提供独立的内存库生命周期管理器。"""

    manager = EngineLifecycle(engine_factory=factory)
    yield manager
    await manager.close()


async def _user_tables(manager: EngineLifecycle) -> list[str]:
    async with manager.connection() as conn:
        result = await conn.exec_driver_sql(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        )
        return [row[0] for row in result.fetchall()]


@pytest.mark.asyncio
async def test_concurrent_ensure_ready_builds_engine_once(
    lifecycle: EngineLifecycle, factory: CountingEngineFactory
) -> None:
    """并发调用 ensure_ready 只创建一次引擎。"""

    assert lifecycle.state == EngineState.UNINITIALIZED

    await asyncio.gather(*(lifecycle.ensure_ready() for _ in range(20)))

    assert factory.calls == 1
    assert lifecycle.state == EngineState.READY
    assert lifecycle.generation == 1

    await lifecycle.ensure_ready()
    assert factory.calls == 1


@pytest.mark.asyncio
async def test_init_failure_is_broadcast_and_retryable() -> None:
    """初始化失败广播给所有等待者，状态回到 UNINITIALIZED，之后可重试。"""

    factory = CountingEngineFactory(failures=1)
    manager = EngineLifecycle(engine_factory=factory)

    results = await asyncio.gather(
        *(manager.ensure_ready() for _ in range(5)),
        return_exceptions=True,
    )
    assert factory.calls == 1
    assert all(isinstance(r, EngineInitError) for r in results)
    assert "bootstrap resource unavailable" in str(results[0])
    assert manager.state == EngineState.UNINITIALIZED

    await manager.ensure_ready()
    assert factory.calls == 2
    assert manager.state == EngineState.READY
    await manager.close()


@pytest.mark.asyncio
async def test_connection_surfaces_init_failure() -> None:
    """connection() 在引擎不可用时抛出 EngineInitError。"""

    manager = EngineLifecycle(engine_factory=CountingEngineFactory(failures=10))
    with pytest.raises(EngineInitError):
        async with manager.connection():
            pass


@pytest.mark.asyncio
async def test_reset_replaces_instance_with_empty_catalog(
    lifecycle: EngineLifecycle, factory: CountingEngineFactory
) -> None:
    """reset 之后是新的空实例，代数递增。"""

    async with lifecycle.connection() as conn:
        await conn.exec_driver_sql("CREATE TABLE things (id INTEGER PRIMARY KEY)")
    assert await _user_tables(lifecycle) == ["things"]

    await lifecycle.reset()

    assert lifecycle.state == EngineState.READY
    assert lifecycle.generation == 2
    assert factory.calls == 2
    assert await _user_tables(lifecycle) == []


@pytest.mark.asyncio
async def test_reset_before_first_use_initializes(
    lifecycle: EngineLifecycle, factory: CountingEngineFactory
) -> None:
    """从未初始化时 reset 等价于首次 ensure_ready。"""

    await lifecycle.reset()

    assert lifecycle.state == EngineState.READY
    assert factory.calls == 1
    assert lifecycle.generation == 1


@pytest.mark.asyncio
async def test_reset_logs_release_failure_and_continues(
    lifecycle: EngineLifecycle,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """释放旧实例失败只记录日志，不影响新实例创建。"""

    await lifecycle.ensure_ready()

    original_dispose = AsyncEngine.dispose

    async def failing_dispose(self: AsyncEngine, close: bool = True) -> None:
        await original_dispose(self, close)
        raise RuntimeError("dispose boom")

    with monkeypatch.context() as m:
        m.setattr(AsyncEngine, "dispose", failing_dispose)
        await lifecycle.reset()

    assert lifecycle.state == EngineState.READY
    assert lifecycle.generation == 2
    assert "dispose boom" in caplog.text


@pytest.mark.asyncio
async def test_close_returns_to_uninitialized(lifecycle: EngineLifecycle) -> None:
    await lifecycle.ensure_ready()
    await lifecycle.close()
    assert lifecycle.state == EngineState.UNINITIALIZED

    await lifecycle.ensure_ready()
    assert lifecycle.state == EngineState.READY


@pytest.mark.asyncio
async def test_reset_waits_for_connection_holder(lifecycle: EngineLifecycle) -> None:
    """持有连接期间 reset 必须等待，释放后才替换实例。"""

    holding = asyncio.Event()
    release = asyncio.Event()

    async def hold_connection() -> int:
        async with lifecycle.connection() as conn:
            holding.set()
            await release.wait()
            result = await conn.exec_driver_sql("SELECT 1")
            return result.scalar_one()

    holder = asyncio.create_task(hold_connection())
    await holding.wait()

    resetter = asyncio.create_task(lifecycle.reset())
    await asyncio.sleep(0.05)
    assert not resetter.done()
    assert lifecycle.generation == 1

    release.set()
    assert await holder == 1
    await resetter

    assert lifecycle.generation == 2
    assert lifecycle.state == EngineState.READY
