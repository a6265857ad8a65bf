import logging
from functools import lru_cache

from ..domain.interfaces import SessionManager
from ..infrastructure.engine.factory import get_engine_lifecycle
from .session_manager import WorkbenchSession

log = logging.getLogger(__name__)


@lru_cache()
def get_workbench_session() -> SessionManager:
    """
    [工厂方法] 组装并获取 WorkbenchSession 单例。

    职责：
    1. 调用底层工厂方法获取引擎生命周期管理器。
    2. 将其注入到 WorkbenchSession 中。
    3. 返回组装好的 Service（API 层通过依赖注入获取，不直接访问模块级单例）。
    """
    log.info("正在组装 WorkbenchSession...")
    return WorkbenchSession(lifecycle=get_engine_lifecycle())
