from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- 路径配置 ---
# workbench/core/config.py -> workbench -> 项目根目录
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# 优先使用项目根目录的 .env；如果不存在，则回退到上一级目录。
_ENV_CANDIDATES = [PROJECT_ROOT / ".env", PROJECT_ROOT.parent / ".env"]
ENV_FILE_PATH = next((p for p in _ENV_CANDIDATES if p.exists()), _ENV_CANDIDATES[0])


class BaseConfigSettings(BaseSettings):
    """
    基础配置类，定义通用的加载行为。
    """
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra="ignore",           # 忽略多余字段
        frozen=True,              # 不可变
        case_sensitive=False,     # 大小写不敏感
    )


class EngineSettings(BaseConfigSettings):
    """嵌入式引擎配置 (ENGINE_*)

    默认使用内存库：进程重启后数据不保留。
    """
    model_config = SettingsConfigDict(env_prefix="ENGINE_")

    url: str = "sqlite+aiosqlite:///:memory:"
    echo: bool = False


class SampleDataSettings(BaseConfigSettings):
    """示例数据配置 (SAMPLE_DATA_*)"""
    model_config = SettingsConfigDict(env_prefix="SAMPLE_DATA_")

    # 默认在首次查看表结构时才写入示例数据
    seed_on_startup: bool = False


class ApiSettings(BaseConfigSettings):
    """HTTP 接口配置 (API_*)"""
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = Field(default=["*"])
    export_filename: str = "database_export.sql"


class Settings(BaseConfigSettings):
    """
    主配置类，聚合所有子配置。
    """
    # --- 全局 ---
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # --- 模块 ---
    engine: EngineSettings = Field(default_factory=EngineSettings)
    sample_data: SampleDataSettings = Field(default_factory=SampleDataSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


# --- 实例化 ---
try:
    settings = Settings()
except Exception as e:
    print(f"!!! 严重错误: 无法从 {ENV_FILE_PATH} 加载配置。")
    print(f"错误详情: {e}")
    raise e
