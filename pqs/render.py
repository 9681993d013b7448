from pqs.constants import Rendering
from pqs.dialect.base import BaseDialect
from pqs.dialect.enums import Dialects


def get_dialect_generator(
    dialect: Dialects,
    rendering: Rendering | None = None,
) -> BaseDialect:
    if dialect == Dialects.MYSQL:
        from pqs.dialect.mysql import MySQLDialect

        return MySQLDialect(rendering=rendering)
    elif dialect == Dialects.SQLITE:
        from pqs.dialect.sqlite import SQLiteDialect

        return SQLiteDialect(rendering=rendering)
    else:
        raise ValueError(f"Unsupported dialect {dialect}")
