"""Split SQL scripts into individual statements."""

from __future__ import annotations

STATEMENT_TERMINATOR = ";"
LINE_COMMENT = "--"


def split_statements(sql: str) -> list[str]:
    """Split ``sql`` on statement terminators.

    ``--`` line comments and ``/* */`` block comments are dropped, quoted
    text is kept intact, and blank statements (including the one after a
    trailing terminator) are skipped.
    """
    statements: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0
    length = len(sql)

    def flush() -> None:
        statement = "".join(current).strip()
        if statement:
            statements.append(statement)
        current.clear()

    while i < length:
        char = sql[i]

        if quote is not None:
            current.append(char)
            if char == quote:
                quote = None
            i += 1
            continue

        if char in ("'", '"'):
            quote = char
            current.append(char)
        elif sql.startswith(LINE_COMMENT, i):
            end = sql.find("\n", i)
            if end == -1:
                break
            i = end
            continue
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            if end == -1:
                break
            i = end + 2
            continue
        elif char == STATEMENT_TERMINATOR:
            flush()
        else:
            current.append(char)
        i += 1

    flush()
    return statements
