"""会话管理相关异常定义。

传播约定：
- `EngineInitError`：引擎启动失败，可从 `ensure_ready()` 向上抛出，调用方可稍后重试；
- `QueryError`：单条 SQL 的执行错误，查询执行器会将其收敛为 `QueryResult.error`；
- `ResetError`：释放旧实例失败，仅记录日志，不阻断新实例的创建。
"""


class WorkbenchError(Exception):
    """所有会话管理异常的基类。"""


class EngineInitError(WorkbenchError):
    """嵌入式引擎初始化失败。"""


class QueryError(WorkbenchError):
    """SQL 执行失败。

    Attributes:
        sql: 出错的 SQL 文本。
        message: 引擎返回的原始错误信息。
    """

    def __init__(self, message: str, *, sql: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.sql = sql


class ResetError(WorkbenchError):
    """释放旧引擎实例失败。"""
