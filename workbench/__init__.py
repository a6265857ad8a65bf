"""
SQL Workbench 后端主包。

本项目采用分层架构：
- domain：结果模型、表结构描述与异常定义
- infrastructure：嵌入式 SQLite 引擎的生命周期管理（SQLAlchemy + aiosqlite）
- services：查询执行、结构查看、示例数据、导出脚本等编排
- api：FastAPI 接口层
- core：配置、日志等通用能力
"""
