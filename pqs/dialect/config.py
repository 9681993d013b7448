class DialectConfig:

    def __init__(self):
        pass

    def connection_string(self) -> str:
        raise NotImplementedError

    @property
    def connect_args(self) -> dict:
        return {}


class MySQLConfig(DialectConfig):
    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        database: str,
        port: int = 3306,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.database = database

    def connection_string(self) -> str:
        return f"mysql+pymysql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"


class SQLiteConfig(DialectConfig):
    def __init__(self, path: str | None = None):
        self.path = path

    def connection_string(self) -> str:
        if not self.path:
            return "sqlite://"
        return f"sqlite:///{self.path}"


class URLConfig(DialectConfig):
    """A ready-made SQLAlchemy URL for either dialect."""

    def __init__(self, url: str):
        self.url = url

    def connection_string(self) -> str:
        return self.url
