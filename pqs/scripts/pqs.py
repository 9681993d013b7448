from logging import DEBUG, StreamHandler
from pathlib import Path as PathlibPath

from click import (
    Choice,
    ClickException,
    Path,
    argument,
    echo,
    group,
    option,
    pass_context,
    style,
)
from pydantic import TypeAdapter
from sqlalchemy import text

from pqs.constants import logger
from pqs.core.evaluate import Discard, predict
from pqs.core.exceptions import ConfigurationException, OracleMismatchException
from pqs.core.models.expressions import Expr
from pqs.core.trace import trace as trace_expression
from pqs.dialect import URLConfig
from pqs.dialect.enums import Dialects
from pqs.execution.config import load_config_file
from pqs.oracle.comparison import ComparisonOracle

DIALECT_CHOICES = Choice([d.value for d in Dialects], case_sensitive=False)

EXPRESSION_ADAPTER: TypeAdapter = TypeAdapter(Expr)


def load_expression(input: str, dialect: Dialects):
    with open(input, "r") as f:
        expression = EXPRESSION_ADAPTER.validate_json(f.read())
    try:
        dialect.default_renderer().validate(expression)
    except ConfigurationException as e:
        raise ClickException(str(e)) from e
    return expression


@group()
@option("--debug", default=False, is_flag=True, help="Enable debug logging")
@pass_context
def cli(ctx, debug: bool):
    """Predict, trace and check the expected value of SQL expressions."""
    ctx.ensure_object(dict)
    ctx.obj["DEBUG"] = debug
    if debug:
        if not any([isinstance(x, StreamHandler) for x in logger.handlers]):
            logger.addHandler(StreamHandler())
        logger.setLevel(DEBUG)


@cli.command("predict")
@argument("input", type=Path(exists=True))
@option("--dialect", type=DIALECT_CHOICES, default=Dialects.MYSQL.value)
def predict_command(input, dialect: str):
    """Print the predicted value of an expression tree stored as JSON."""
    engine_dialect = Dialects(dialect)
    outcome = predict(load_expression(input, engine_dialect), engine_dialect)
    if isinstance(outcome, Discard):
        echo(style(f"Uninformative: {outcome.reason}", fg="yellow"))
        return
    echo(str(outcome.value))


@cli.command("trace")
@argument("input", type=Path(exists=True))
@option("--dialect", type=DIALECT_CHOICES, default=Dialects.MYSQL.value)
def trace_command(input, dialect: str):
    """Print every subexpression with its predicted value."""
    engine_dialect = Dialects(dialect)
    echo(
        trace_expression(load_expression(input, engine_dialect), engine_dialect),
        nl=False,
    )


@cli.command("check")
@argument("input", type=Path(exists=True))
@option("--dialect", type=DIALECT_CHOICES, default=None)
@option("--url", default=None, help="SQLAlchemy connection URL")
@option("--config", "config_path", type=Path(exists=True), default=None)
@option(
    "--setup",
    type=Path(exists=True),
    default=None,
    help="SQL script run before the check, e.g. to create the pivot row",
)
@pass_context
def check_command(ctx, input, dialect, url, config_path, setup):
    """Compare the predicted value with the value a live engine returns."""
    engine_dialect = Dialects(dialect) if dialect else Dialects.SQLITE
    engine_config = None
    if config_path:
        runtime = load_config_file(PathlibPath(config_path))
        engine_dialect = Dialects(dialect) if dialect else runtime.engine_dialect
        engine_config = runtime.engine_config
    if url:
        engine_config = URLConfig(url)
    engine = engine_dialect.default_engine(engine_config)
    expression = load_expression(input, engine_dialect)
    with engine.connect() as connection:
        if setup:
            with open(setup, "r") as f:
                statements = [s for s in f.read().split(";") if s.strip()]
            for statement in statements:
                connection.execute(text(statement))
        oracle = ComparisonOracle(connection, engine_dialect)
        try:
            outcome = oracle.check(expression)
        except OracleMismatchException as e:
            echo(style("Mismatch", fg="red", bold=True), err=True)
            echo(e.report.render(), err=True)
            ctx.exit(1)
            return
    if isinstance(outcome, Discard):
        echo(style(f"Uninformative: {outcome.reason}", fg="yellow"))
        return
    echo(style(f"Match: {outcome.value}", fg="green"))


if __name__ == "__main__":
    cli()
