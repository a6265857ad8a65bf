"""Domain 层：领域模型、异常与抽象接口定义。"""

from .errors import EngineInitError, QueryError, ResetError, WorkbenchError
from .interfaces import DatabaseExporter, SchemaIntrospection, SessionManager, SqlExecutor
from .models import ColumnDescriptor, EngineState, QueryResult, Scalar, TableDescriptor

__all__ = [
    "ColumnDescriptor",
    "DatabaseExporter",
    "EngineInitError",
    "EngineState",
    "QueryError",
    "QueryResult",
    "ResetError",
    "Scalar",
    "SchemaIntrospection",
    "SessionManager",
    "SqlExecutor",
    "TableDescriptor",
    "WorkbenchError",
]
