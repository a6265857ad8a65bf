"""FastAPI 服务入口。

提供的核心能力：
- SQL 执行：任意 SQL 文本，结果/错误统一为 QueryResult（SQL 错误也返回 200）
- 结构查看：表列表、列元数据、建表语句概览（首次查看时写入示例数据）
- 数据库管理：重置并重新写入示例数据、导出为 SQL 脚本
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ..core.config import settings
from ..core.logging import setup_logging
from ..domain.errors import EngineInitError, QueryError
from ..domain.interfaces import SessionManager
from ..domain.models import QueryResult, TableDescriptor
from ..services.factory import get_workbench_session
from .schemas import ErrorResponse, HealthResponse, QueryRequest, TableListResponse

setup_logging()
log = logging.getLogger(__name__)


async def _startup() -> None:
    """应用启动初始化。

    - 预先初始化嵌入式引擎（失败只记录日志，后续请求会重试）
    - 按配置决定是否立即写入示例数据
    """

    session = get_workbench_session()
    try:
        await session.ensure_ready()
        if settings.sample_data.seed_on_startup:
            await session.seed_if_empty()
    except EngineInitError as exc:
        log.error("启动阶段数据库引擎不可用，依赖数据库的功能将暂停: %s", exc)


async def _shutdown() -> None:
    """应用关闭阶段清理。"""

    await get_workbench_session().close()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI 生命周期管理。"""

    await _startup()
    try:
        yield
    finally:
        await _shutdown()


app = FastAPI(title="SQL Workbench API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EngineInitError)
async def _engine_init_error_handler(_: Request, exc: EngineInitError) -> JSONResponse:
    """引擎不可用：所有依赖数据库的功能返回 503。"""

    payload = ErrorResponse(detail=str(exc))
    return JSONResponse(status_code=503, content=payload.model_dump())


@app.exception_handler(QueryError)
async def _query_error_handler(_: Request, exc: QueryError) -> JSONResponse:
    """内部目录查询失败（用户 SQL 的错误不会走到这里）。"""

    log.error("内部查询失败: %s (sql=%s)", exc.message, exc.sql)
    payload = ErrorResponse(detail=exc.message)
    return JSONResponse(status_code=500, content=payload.model_dump())


@app.get("/api/health", response_model=HealthResponse)
async def health(session: SessionManager = Depends(get_workbench_session)) -> HealthResponse:
    """健康检查。"""

    return HealthResponse(engine_state=session.state)


@app.post("/api/query", response_model=QueryResult)
async def execute_query(
    req: QueryRequest,
    session: SessionManager = Depends(get_workbench_session),
) -> QueryResult:
    """执行 SQL 文本。"""

    return await session.execute(req.sql)


@app.get("/api/schema", response_model=list[TableDescriptor])
async def get_schema(session: SessionManager = Depends(get_workbench_session)) -> list[TableDescriptor]:
    """获取全部表结构（数据库为空时先写入示例数据）。"""

    await session.seed_if_empty()
    return await session.describe_schema()


@app.get("/api/schema/overview", response_model=QueryResult)
async def get_schema_overview(session: SessionManager = Depends(get_workbench_session)) -> QueryResult:
    """表名与建表语句。"""

    return await session.schema_overview()


@app.get("/api/schema/tables", response_model=TableListResponse)
async def list_tables(session: SessionManager = Depends(get_workbench_session)) -> TableListResponse:
    """获取用户表列表。"""

    return TableListResponse(tables=await session.list_tables())


@app.get("/api/schema/tables/{table_name}", response_model=TableDescriptor)
async def describe_table(
    table_name: str,
    session: SessionManager = Depends(get_workbench_session),
) -> TableDescriptor:
    """获取单表列元数据。

    表名会以文本方式拼入目录查询，因此只接受 `list_tables()` 中存在的表名。
    """

    if table_name not in await session.list_tables():
        raise HTTPException(status_code=404, detail="表不存在")
    columns = await session.describe_table(table_name)
    return TableDescriptor(name=table_name, columns=columns)


@app.post("/api/database/reset", response_model=TableListResponse)
async def reset_database(session: SessionManager = Depends(get_workbench_session)) -> TableListResponse:
    """重置数据库并重新写入示例数据。"""

    await session.reset_and_reseed()
    return TableListResponse(tables=await session.list_tables())


@app.get("/api/database/export", response_class=PlainTextResponse)
async def export_database(session: SessionManager = Depends(get_workbench_session)) -> PlainTextResponse:
    """导出数据库为 SQL 脚本（以附件形式下载）。"""

    script = await session.export_as_script()
    filename = settings.api.export_filename
    return PlainTextResponse(
        content=script,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
