from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pqs.dialect.base import BaseDialect

from pqs.constants import Rendering
from pqs.dialect.config import DialectConfig, URLConfig


def default_factory(conf: DialectConfig, config_type):
    from sqlalchemy import create_engine

    if not isinstance(conf, (config_type, URLConfig)):
        raise TypeError(
            f"Invalid dialect configuration for type {config_type.__name__}, is {type(conf)}"
        )
    if conf.connect_args:
        return create_engine(
            conf.connection_string(), future=True, connect_args=conf.connect_args
        )
    return create_engine(conf.connection_string(), future=True)


class Dialects(Enum):
    MYSQL = "mysql"
    SQLITE = "sqlite"

    @classmethod
    def _missing_(cls, value):
        if value in ("sqlite3", "SQLite3"):
            return cls.SQLITE
        strval = str(value)
        if strval.lower() != strval:
            return cls(strval.lower())
        return super()._missing_(value)

    def default_renderer(self, rendering: Rendering | None = None) -> "BaseDialect":
        from pqs.render import get_dialect_generator

        return get_dialect_generator(self, rendering)

    def default_engine(self, conf=None, _engine_factory: Callable = default_factory):
        if self == Dialects.MYSQL:
            from pqs.dialect.config import MySQLConfig

            if conf is None:
                raise ValueError(
                    "MySQL requires connection details; pass a MySQLConfig."
                )
            return _engine_factory(conf, MySQLConfig)
        elif self == Dialects.SQLITE:
            from pqs.dialect.config import SQLiteConfig

            if not conf:
                conf = SQLiteConfig()
            return _engine_factory(conf, SQLiteConfig)
        raise ValueError(
            f"Unsupported dialect {self} for default engine creation; create one explicitly."
        )
