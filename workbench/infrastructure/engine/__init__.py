"""嵌入式数据库引擎基础设施（SQLAlchemy + aiosqlite）。

该包负责：
- 异步 Engine 的创建（内存 SQLite，单连接）
- 引擎实例的生命周期与互斥访问
- 多语句 SQL 文本的切分
"""

from .factory import create_workbench_engine, get_engine_lifecycle
from .lifecycle import EngineLifecycle
from .statements import split_statements

__all__ = [
    "EngineLifecycle",
    "create_workbench_engine",
    "get_engine_lifecycle",
    "split_statements",
]
