"""SQL 文本切分单元测试。"""

from __future__ import annotations

import pytest

from workbench.infrastructure.engine.statements import split_statements


@pytest.mark.parametrize(
    ("sql_text", "expected"),
    [
        ("", []),
        ("   \n\t ", []),
        ("-- just a comment", []),
        ("/* block */ ;", []),
        ("SELECT 1", ["SELECT 1"]),
        ("SELECT 1;", ["SELECT 1;"]),
        ("SELECT 1; SELECT 2;", ["SELECT 1;", "SELECT 2;"]),
        ("SELECT 1;\nSELECT 2", ["SELECT 1;", "SELECT 2"]),
        ("SELECT 'a;b'; SELECT 2;", ["SELECT 'a;b';", "SELECT 2;"]),
        ("SELECT 1; -- trailing", ["SELECT 1;"]),
        (";;SELECT 1;;", ["SELECT 1;"]),
    ],
)
def test_split_statements(sql_text: str, expected: list[str]) -> None:
    assert split_statements(sql_text) == expected


def test_split_keeps_trigger_body_together() -> None:
    """触发器体内的分号不会切断语句。"""

    sql_text = (
        "CREATE TRIGGER t_ins AFTER INSERT ON t BEGIN "
        "UPDATE t SET x = 1; UPDATE t SET y = 2; "
        "END; SELECT 1;"
    )
    statements = split_statements(sql_text)
    assert len(statements) == 2
    assert statements[0].startswith("CREATE TRIGGER")
    assert statements[0].endswith("END;")
    assert statements[1] == "SELECT 1;"


@pytest.mark.parametrize(
    ("sql_text", "expected"),
    [
        ("SELECT 'it''s;here'; SELECT 2;", ["SELECT 'it''s;here';", "SELECT 2;"]),
        ('SELECT 1 AS "a;b"; SELECT 2;', ['SELECT 1 AS "a;b";', "SELECT 2;"]),
        ("SELECT 1 AS [x;y]; SELECT 2;", ["SELECT 1 AS [x;y];", "SELECT 2;"]),
        ("SELECT 1 /* ; */; SELECT 2;", ["SELECT 1 /* ; */;", "SELECT 2;"]),
        ("SELECT 1 -- ;\n; SELECT 2;", ["SELECT 1 -- ;\n;", "SELECT 2;"]),
    ],
)
def test_split_ignores_semicolons_inside_quotes_and_comments(sql_text: str, expected: list[str]) -> None:
    assert split_statements(sql_text) == expected


def test_split_long_literal_with_many_semicolons() -> None:
    """字面量里成千上万个分号只构成一条语句，随后的语句照常切出。"""

    literal = ";" * 50_000
    sql_text = f"INSERT INTO t VALUES ('{literal}'); SELECT 1;"

    statements = split_statements(sql_text)

    assert len(statements) == 2
    assert statements[0] == f"INSERT INTO t VALUES ('{literal}');"
    assert statements[1] == "SELECT 1;"
