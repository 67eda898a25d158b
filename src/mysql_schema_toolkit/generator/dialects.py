"""The closed set of supported dialect variants."""

from __future__ import annotations

import logging
from enum import Enum

from ..exceptions import UnsupportedOperationError
from .query_generator import MariaDBQueryGenerator, MySQLQueryGenerator

logger = logging.getLogger(__name__)


class SQLDialect(str, Enum):
    MYSQL = "mysql"
    MARIADB = "mariadb"


_GENERATORS: dict[SQLDialect, type[MySQLQueryGenerator]] = {
    SQLDialect.MYSQL: MySQLQueryGenerator,
    SQLDialect.MARIADB: MariaDBQueryGenerator,
}


def create_query_generator(
    dialect: SQLDialect | str = SQLDialect.MYSQL,
) -> MySQLQueryGenerator:
    """
    Build the generator for ``dialect``.

    Raises:
        UnsupportedOperationError: If the dialect is not supported.
    """
    try:
        key = SQLDialect(str(getattr(dialect, "value", dialect)).lower())
    except ValueError as exc:
        raise UnsupportedOperationError("create_query_generator", str(dialect)) from exc
    logger.debug("Using %s query generator", key.value)
    return _GENERATORS[key]()
