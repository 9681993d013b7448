from pqs.dialect.base import BaseDialect
from pqs.dialect.enums import Dialects


class MySQLDialect(BaseDialect):
    DIALECT = Dialects.MYSQL
    QUOTE_CHARACTER = "`"
    # backslash is an escape character unless NO_BACKSLASH_ESCAPES is set
    ESCAPE_BACKSLASH = True
    EXPLAIN_FLAG = "FORMAT=TRADITIONAL"
