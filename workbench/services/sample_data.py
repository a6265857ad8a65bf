"""示例数据写入服务。

写入固定的三张关联表（users / posts / comments）及演示数据。
“目录非空”即视为已写入（即便已有的表与示例无关），因此可在 reset 之后安全地重复调用。
"""

from __future__ import annotations

import asyncio
import logging

from ..domain.errors import QueryError
from ..infrastructure.engine.lifecycle import EngineLifecycle
from .query_executor import QueryExecutor
from .schema_introspector import LIST_TABLES_SQL

log = logging.getLogger(__name__)

SAMPLE_SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
      id INTEGER PRIMARY KEY,
      name TEXT NOT NULL,
      email TEXT UNIQUE NOT NULL,
      age INTEGER,
      created_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS posts (
      id INTEGER PRIMARY KEY,
      user_id INTEGER NOT NULL,
      title TEXT NOT NULL,
      content TEXT,
      published BOOLEAN DEFAULT 0,
      created_at TEXT DEFAULT CURRENT_TIMESTAMP,
      FOREIGN KEY (user_id) REFERENCES users (id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS comments (
      id INTEGER PRIMARY KEY,
      post_id INTEGER NOT NULL,
      user_id INTEGER NOT NULL,
      content TEXT NOT NULL,
      created_at TEXT DEFAULT CURRENT_TIMESTAMP,
      FOREIGN KEY (post_id) REFERENCES posts (id),
      FOREIGN KEY (user_id) REFERENCES users (id)
    )
    """,
)

SAMPLE_ROWS: tuple[str, ...] = (
    """
    INSERT INTO users (name, email, age) VALUES
      ('John Doe', 'john@example.com', 28),
      ('Jane Smith', 'jane@example.com', 32),
      ('Bob Johnson', 'bob@example.com', 45),
      ('Alice Williams', 'alice@example.com', 24),
      ('Charlie Brown', 'charlie@example.com', 37)
    """,
    """
    INSERT INTO posts (user_id, title, content, published) VALUES
      (1, 'Getting Started with SQL', 'SQL is a powerful language for working with databases...', 1),
      (1, 'Advanced SQL Techniques', 'In this post, we will explore some advanced SQL concepts...', 1),
      (2, 'Web Development Tips', 'Here are some tips for becoming a better web developer...', 1),
      (3, 'My Travel Adventures', 'I recently visited some amazing places...', 0),
      (4, 'Cooking Recipes', 'My favorite recipes for quick and healthy meals...', 1),
      (5, 'Book Recommendations', 'These are the books I read last month...', 1),
      (2, 'Career Advice', 'Tips for advancing your career in tech...', 0)
    """,
    """
    INSERT INTO comments (post_id, user_id, content) VALUES
      (1, 2, 'Great introduction to SQL!'),
      (1, 3, 'This helped me understand the basics.'),
      (1, 4, 'Looking forward to more SQL tutorials.'),
      (2, 5, 'These advanced techniques are exactly what I needed.'),
      (2, 3, 'Could you explain joins in more detail?'),
      (3, 1, 'Thanks for sharing these tips!'),
      (5, 2, 'I tried the pasta recipe and it was delicious!'),
      (6, 3, 'I just ordered the third book on your list.'),
      (6, 4, 'Have you read anything by that author''s latest work?')
    """,
)


class SampleDataLoader:
    """示例数据写入器。

    每次调用都重新检查目录：用户删光所有表后再次调用会重新写入。
    """

    def __init__(self, *, lifecycle: EngineLifecycle, executor: QueryExecutor) -> None:
        """初始化写入器。

        Args:
            lifecycle: 引擎生命周期管理器（引擎不可用时由它抛出 EngineInitError）。
            executor: 查询执行器，所有写入都走与用户查询相同的执行路径。
        """
        self._lifecycle = lifecycle
        self._executor = executor
        self._lock = asyncio.Lock()

    async def seed_if_empty(self) -> None:
        """数据库为空时写入示例数据。

        Raises:
            EngineInitError: 引擎初始化失败。
            QueryError: 示例 DDL 或数据写入失败。
        """

        async with self._lock:
            await self._lifecycle.ensure_ready()

            existing = await self._executor.execute(LIST_TABLES_SQL)
            if existing.error is not None:
                raise QueryError(existing.error, sql=LIST_TABLES_SQL)
            if existing.rows:
                log.info("数据库已有用户表，跳过示例数据写入")
                return

            log.info("正在写入示例数据 (generation=%s)...", self._lifecycle.generation)
            for statement in (*SAMPLE_SCHEMA, *SAMPLE_ROWS):
                result = await self._executor.execute(statement)
                if result.error is not None:
                    log.error("示例数据写入失败: %s", result.error)
                    raise QueryError(result.error, sql=statement)

            log.info("示例数据写入完成")
