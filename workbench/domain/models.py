"""核心领域数据模型（Pydantic）。

该模块承载会跨层传递的数据结构，例如：
- `QueryResult`：任意一次 SQL 执行的统一结果（列、行、可选错误）
- `ColumnDescriptor` / `TableDescriptor`：结构查看得到的表与列元数据
- `EngineState`：嵌入式引擎实例的生命周期状态

类型约束：
- 单元格取值统一为 `Scalar`，与 SQLite 的五种存储类型一一对应。
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

Scalar = int | float | str | bytes | None


class EngineState(StrEnum):
    """引擎实例生命周期状态。"""

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZING = "INITIALIZING"
    READY = "READY"


class QueryResult(BaseModel):
    """一次 SQL 执行的统一结果。

    约束：
    - 存在 `error` 时，`columns` 与 `rows` 必须为空；
    - `columns` 为空时，`rows` 必须为空；
    - 每一行的单元格数量与 `columns` 长度一致。

    Attributes:
        columns: 列名（顺序与引擎输出一致）。
        rows: 行数据（按引擎返回顺序）。
        error: 引擎返回的错误信息（原样保留）。
    """

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    columns: list[str] = Field(default_factory=list, description="列名（引擎输出顺序）")
    rows: list[list[Scalar]] = Field(default_factory=list, description="行数据")
    error: str | None = Field(default=None, description="错误信息（可选）")

    @model_validator(mode="after")
    def _check_shape(self) -> "QueryResult":
        """校验结果形状约束。"""
        if self.error is not None and (self.columns or self.rows):
            raise ValueError("带 error 的结果不能同时包含列或行")
        if not self.columns and self.rows:
            raise ValueError("没有列时不能包含行")
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"第 {index} 行有 {len(row)} 个单元格，期望 {width} 个")
        return self

    @classmethod
    def empty(cls) -> "QueryResult":
        """执行成功但没有可展示的数据（DDL、INSERT/UPDATE/DELETE 等）。"""
        return cls()

    @classmethod
    def failure(cls, message: str) -> "QueryResult":
        """执行失败的结果。"""
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.error is None


class ColumnDescriptor(BaseModel):
    """表中单列的目录元数据（对应 `PRAGMA table_info` 的一行）。"""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    name: str = Field(..., description="列名")
    declared_type: str = Field(default="", description="建表时声明的类型（可为空）")
    not_null: bool = Field(default=False, description="是否 NOT NULL")
    default_value: Scalar = Field(default=None, description="默认值表达式（可选）")
    is_primary_key: bool = Field(default=False, description="是否属于主键")


class TableDescriptor(BaseModel):
    """用户表及其列（列顺序为建表声明顺序）。"""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    name: str = Field(..., description="表名（区分大小写，与目录存储一致）")
    columns: list[ColumnDescriptor] = Field(default_factory=list, description="列元数据")
