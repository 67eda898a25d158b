"""
Classify a path string as a JSON expression or a plain dotted path.

The scanner walks the string left to right. At each position it tries, in
order, a JSON function name followed by ``(``, a JSON operator, and a
generic token (quoted run, word run or one punctuation character). The
result is ``True`` when any JSON construct was seen.

This is a narrow heuristic, not a SQL expression parser: unbalanced
brackets or a semicolon make the whole expression invalid.
"""

from __future__ import annotations

import re
from typing import Any

from ..exceptions import InvalidJsonStatementError

JSON_FUNCTION_PATTERN = re.compile(
    r"^\s*((?:[a-z]+_){0,2}jsonb?(?:_[a-z]+){0,2})\(", re.IGNORECASE
)
JSON_OPERATOR_PATTERN = re.compile(r"^\s*(->>?|@>|<@|\?[|&]?|\|{2}|#-)")
TOKEN_CAPTURE_PATTERN = re.compile(
    r"""^\s*((?:([`"'])(?:(?!\2).|\2{2})*\2)|[\w\d\s]+|[().,;+-])"""
)


def is_json_statement(statement: Any) -> bool:
    """
    Return ``True`` if ``statement`` is already a JSON expression.

    Raises:
        InvalidJsonStatementError: If the statement contains a JSON construct
            and is malformed (unbalanced brackets or a ``;``).
    """
    if not isinstance(statement, str):
        return False

    position = 0
    opening = 0
    closing = 0
    has_json = False
    has_invalid_token = False

    while position < len(statement):
        rest = statement[position:]

        match = JSON_FUNCTION_PATTERN.match(rest)
        if match:
            position += match.end(1)
            has_json = True
            continue

        match = JSON_OPERATOR_PATTERN.match(rest)
        if match:
            position += match.end()
            has_json = True
            continue

        match = TOKEN_CAPTURE_PATTERN.match(rest)
        if match:
            token = match.group(1)
            if token == "(":
                opening += 1
            elif token == ")":
                closing += 1
            elif token == ";":
                has_invalid_token = True
                break
            position += match.end()
            continue

        break

    if opening != closing:
        has_invalid_token = True
    if has_json and has_invalid_token:
        raise InvalidJsonStatementError(statement)
    return has_json
