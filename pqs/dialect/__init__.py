from .config import DialectConfig, MySQLConfig, SQLiteConfig, URLConfig

__all__ = [
    "DialectConfig",
    "MySQLConfig",
    "SQLiteConfig",
    "URLConfig",
]
