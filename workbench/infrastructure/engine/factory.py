"""嵌入式引擎 Engine 工厂与生命周期单例。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from ...core.config import settings
from .lifecycle import EngineLifecycle


def ensure_sqlite_parent_dir(database_url: str) -> None:
    """确保 SQLite 数据库文件的父目录存在（内存库直接跳过）。

    Args:
        database_url: SQLAlchemy 数据库 URL。
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    database_path = url.database
    if not database_path or database_path == ":memory:":
        return

    parent = Path(database_path).parent
    if parent and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


def create_workbench_engine(database_url: str | None = None, *, echo: bool | None = None) -> AsyncEngine:
    """创建一个全新的异步 Engine。

    - StaticPool：整个实例只复用一条底层连接，内存库的数据才不会丢失；
    - AUTOCOMMIT：每条语句独立提交，用户显式写的 BEGIN/COMMIT 原样交给 SQLite。

    Args:
        database_url: 数据库 URL，默认取配置。
        echo: 是否输出 SQL 日志，默认取配置。
    """

    url = database_url or settings.engine.url
    ensure_sqlite_parent_dir(url)
    return create_async_engine(
        url,
        echo=settings.engine.echo if echo is None else echo,
        poolclass=StaticPool,
        isolation_level="AUTOCOMMIT",
    )


@lru_cache
def get_engine_lifecycle() -> EngineLifecycle:
    """创建并缓存引擎生命周期管理器（应用进程内唯一）。"""

    return EngineLifecycle(engine_factory=create_workbench_engine)
