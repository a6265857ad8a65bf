"""SQL 文本切分工具。

SQLite 的 DB-API 一次只能执行一条语句，而用户提交的文本可能包含多条语句。
扫描时跳过字符串字面量、带引号的标识符与注释，只在剩下的分号处借助
`sqlite3.complete_statement` 判断语句边界，因此触发器体中的分号也不会被误切。
"""

from __future__ import annotations

import sqlite3

# 开引号 -> 闭引号；连续两个闭引号表示转义，扫描时自然落在“结束后又开始”的路径上
_QUOTES = {"'": "'", '"': '"', "`": "`", "[": "]"}


def split_statements(sql_text: str) -> list[str]:
    """将 SQL 文本切分为按顺序执行的完整语句。

    末尾缺少分号的片段作为最后一条语句保留（由引擎决定它是否合法）；
    只包含空白或注释的片段会被丢弃。扫描位置单调前进，只有位于字面量与
    注释之外的分号才会触发一次边界判断。

    Args:
        sql_text: 原始 SQL 文本。

    Returns:
        语句列表（保留原始文本，包含结尾分号）。
    """

    statements: list[str] = []
    start = 0
    index = 0
    length = len(sql_text)
    while index < length:
        char = sql_text[index]
        if char in _QUOTES:
            close = sql_text.find(_QUOTES[char], index + 1)
            index = length if close == -1 else close + 1
        elif sql_text.startswith("--", index):
            newline = sql_text.find("\n", index + 2)
            index = length if newline == -1 else newline + 1
        elif sql_text.startswith("/*", index):
            end = sql_text.find("*/", index + 2)
            index = length if end == -1 else end + 2
        elif char == ";":
            candidate = sql_text[start : index + 1]
            if sqlite3.complete_statement(candidate):
                if _has_content(candidate):
                    statements.append(candidate.strip())
                start = index + 1
            index += 1
        else:
            index += 1

    tail = sql_text[start:]
    if _has_content(tail):
        statements.append(tail.strip())
    return statements


def _has_content(fragment: str) -> bool:
    """判断片段中是否有注释与空白之外的内容。"""

    index = 0
    length = len(fragment)
    while index < length:
        char = fragment[index]
        if char.isspace() or char == ";":
            index += 1
        elif fragment.startswith("--", index):
            newline = fragment.find("\n", index)
            index = length if newline == -1 else newline + 1
        elif fragment.startswith("/*", index):
            end = fragment.find("*/", index + 2)
            index = length if end == -1 else end + 2
        else:
            return True
    return False
