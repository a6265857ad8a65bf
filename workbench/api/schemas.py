"""API 层请求/响应模型（Pydantic）。

说明：
- 查询结果直接复用 domain 层的 `QueryResult` / `TableDescriptor`；
- 本模块仅包含轻量的 schema，不做业务逻辑。
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..domain.models import EngineState


class HealthResponse(BaseModel):
    """健康检查响应。"""

    status: str = Field(default="ok", description="服务状态")
    engine_state: EngineState = Field(..., description="嵌入式引擎状态")


class QueryRequest(BaseModel):
    """SQL 执行请求。"""

    sql: str = Field(..., description="SQL 文本（可包含多条语句，空文本也会被接受）")


class TableListResponse(BaseModel):
    """用户表列表响应。"""

    tables: list[str] = Field(default_factory=list, description="按目录顺序排列的表名")


class ErrorResponse(BaseModel):
    """错误响应。"""

    detail: str = Field(..., description="错误信息")
