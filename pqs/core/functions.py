from dataclasses import dataclass
from typing import Callable, Sequence

from pqs.constants import INT64_MIN, UINT64_MASK
from pqs.core.enums import FunctionType
from pqs.core.exceptions import InternalInvariantError, UninformativeCaseException
from pqs.core.models.core import NULL, IntScalar, Scalar
from pqs.core.models.expressions import Expression
from pqs.core.operators import truth_value
from pqs.core.type_resolution import cast_to_most_general_type
from pqs.dialect.enums import Dialects
from pqs.randomly import Randomly

EvaluationRule = Callable[[Sequence[Scalar], Sequence[Expression]], Scalar]


@dataclass(frozen=True)
class FunctionConfig:
    name: str
    evaluate: EvaluationRule
    # minimum number of arguments when variadic
    arg_count: int = 1
    variadic: bool = False

    def validate_arguments(self, arguments: Sequence[Expression]) -> None:
        if self.variadic and len(arguments) >= self.arg_count:
            return
        if len(arguments) == self.arg_count:
            return
        expected = f"at least {self.arg_count}" if self.variadic else self.arg_count
        raise InternalInvariantError(
            f"{self.name} expects {expected} arguments, got {len(arguments)}"
        )


def select_branch(
    condition: Scalar,
    left: Scalar,
    right: Scalar,
    dialect: Dialects = Dialects.MYSQL,
) -> Scalar:
    if truth_value(condition, dialect) is not True:
        return right
    return left


def first_not_null(args: Sequence[Scalar]) -> Scalar:
    for arg in args:
        if not arg.is_null():
            return arg
    return NULL


def mysql_abs(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    if args[0].is_null():
        return NULL
    value = args[0].cast_as_signed().get_int()
    if value == INT64_MIN:
        # the server rejects this with "BIGINT value is out of range"
        raise UninformativeCaseException(f"ABS({value}) is out of BIGINT range")
    return IntScalar(value=abs(value))


def mysql_bit_count(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    """https://dev.mysql.com/doc/refman/8.0/en/bit-functions.html#function_bit-count"""
    if args[0].is_null():
        return NULL
    value = args[0].cast_as_signed().get_int()
    return IntScalar(value=(value & UINT64_MASK).bit_count())


def mysql_benchmark(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    if args[0].is_null():
        return NULL
    if args[0].cast_as_signed().get_int() < 0:
        return NULL
    return IntScalar(value=0)


def mysql_coalesce(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    result = first_not_null(args).cast_as_text()
    return cast_to_most_general_type(result, orig)


def mysql_if(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    """https://dev.mysql.com/doc/refman/8.0/en/flow-control-functions.html#function_if"""
    result = select_branch(args[0], args[1], args[2])
    return cast_to_most_general_type(result, [orig[1], orig[2]])


def mysql_ifnull(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    result = args[1] if args[0].is_null() else args[0]
    return cast_to_most_general_type(result, orig)


def sqlite_abs(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    if args[0].is_null():
        return NULL
    if args[0].is_string():
        raise UninformativeCaseException(f"ABS({args[0]}) returns a REAL in SQLite")
    value = args[0].get_int()
    if value == INT64_MIN:
        raise UninformativeCaseException(f"ABS({value}) raises integer overflow")
    return IntScalar(value=abs(value))


def sqlite_coalesce(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    return first_not_null(args)


def sqlite_iif(args: Sequence[Scalar], orig: Sequence[Expression]) -> Scalar:
    return select_branch(args[0], args[1], args[2], Dialects.SQLITE)


MYSQL_FUNCTIONS: dict[FunctionType, FunctionConfig] = {
    FunctionType.ABS: FunctionConfig(name="ABS", evaluate=mysql_abs, arg_count=1),
    FunctionType.BIT_COUNT: FunctionConfig(
        name="BIT_COUNT", evaluate=mysql_bit_count, arg_count=1
    ),
    FunctionType.BENCHMARK: FunctionConfig(
        name="BENCHMARK", evaluate=mysql_benchmark, arg_count=2
    ),
    FunctionType.COALESCE: FunctionConfig(
        name="COALESCE", evaluate=mysql_coalesce, arg_count=2, variadic=True
    ),
    FunctionType.IF: FunctionConfig(name="IF", evaluate=mysql_if, arg_count=3),
    FunctionType.IFNULL: FunctionConfig(
        name="IFNULL", evaluate=mysql_ifnull, arg_count=2
    ),
}

SQLITE_FUNCTIONS: dict[FunctionType, FunctionConfig] = {
    FunctionType.ABS: FunctionConfig(name="ABS", evaluate=sqlite_abs, arg_count=1),
    FunctionType.COALESCE: FunctionConfig(
        name="COALESCE", evaluate=sqlite_coalesce, arg_count=2, variadic=True
    ),
    FunctionType.IFNULL: FunctionConfig(
        name="IFNULL", evaluate=sqlite_coalesce, arg_count=2
    ),
    FunctionType.IIF: FunctionConfig(name="IIF", evaluate=sqlite_iif, arg_count=3),
}

FUNCTION_REGISTRY: dict[Dialects, dict[FunctionType, FunctionConfig]] = {
    Dialects.MYSQL: MYSQL_FUNCTIONS,
    Dialects.SQLITE: SQLITE_FUNCTIONS,
}


def get_function_config(dialect: Dialects, function: FunctionType) -> FunctionConfig:
    functions = FUNCTION_REGISTRY.get(dialect, {})
    if function not in functions:
        raise InternalInvariantError(
            f"Function {function.name} is not registered for dialect {dialect.value}"
        )
    return functions[function]


def random_function(
    randomly: Randomly, dialect: Dialects = Dialects.MYSQL
) -> FunctionType:
    return randomly.from_options(list(FUNCTION_REGISTRY[dialect]))
