from pqs.core.enums import BooleanOperator, CastType, ComparisonOperator, FunctionType
from pqs.dialect.base import BaseDialect
from pqs.dialect.enums import Dialects

CAST_TYPE_MAP = {
    CastType.SIGNED: "INTEGER",
    CastType.TEXT: "TEXT",
}

COMPARISON_MAP = {
    ComparisonOperator.NULL_SAFE_EQ: "IS",
}

# SQLite has no XOR
BOOLEAN_OPERATOR_MAP = {
    BooleanOperator.AND: "AND",
    BooleanOperator.OR: "OR",
}

FUNCTION_MAP = {
    FunctionType.ABS: lambda x: f"ABS({x[0]})",
    FunctionType.COALESCE: lambda x: f"COALESCE({', '.join(x)})",
    FunctionType.IFNULL: lambda x: f"IFNULL({x[0]}, {x[1]})",
    FunctionType.IIF: lambda x: f"IIF({x[0]}, {x[1]}, {x[2]})",
}


class SQLiteDialect(BaseDialect):
    DIALECT = Dialects.SQLITE
    CAST_TYPE_MAP = CAST_TYPE_MAP
    COMPARISON_MAP = {**BaseDialect.COMPARISON_MAP, **COMPARISON_MAP}
    BOOLEAN_OPERATOR_MAP = BOOLEAN_OPERATOR_MAP
    FUNCTION_MAP = FUNCTION_MAP
    QUOTE_CHARACTER = '"'
    ESCAPE_BACKSLASH = False
    EXPLAIN_FLAG = "QUERY PLAN"
