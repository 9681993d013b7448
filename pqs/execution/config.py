from dataclasses import dataclass
from pathlib import Path

from tomllib import loads

from pqs.constants import CONFIG
from pqs.core.exceptions import ConfigurationException
from pqs.dialect import DialectConfig, MySQLConfig, SQLiteConfig, URLConfig
from pqs.dialect.enums import Dialects

DEFAULT_CASES = 100


@dataclass
class RuntimeConfig:

    engine_dialect: Dialects = Dialects.SQLITE
    engine_config: DialectConfig | None = None
    seed: int | None = None
    max_discard_attempts: int = CONFIG.evaluation.max_discard_attempts
    cases: int = DEFAULT_CASES


def load_config_file(path: Path) -> RuntimeConfig:
    with open(path, "r") as f:
        toml_content = f.read()
    config_data = loads(toml_content)

    engine_raw: dict = config_data.get("engine", {})
    engine_config_raw = engine_raw.get("config", {})
    engine = (
        Dialects(engine_raw.get("dialect"))
        if engine_raw.get("dialect")
        else Dialects.SQLITE
    )
    engine_config: DialectConfig | None
    if "url" in engine_config_raw:
        engine_config = URLConfig(engine_config_raw["url"])
    elif engine == Dialects.MYSQL:
        engine_config = MySQLConfig(**engine_config_raw) if engine_config_raw else None
    elif engine == Dialects.SQLITE:
        engine_config = SQLiteConfig(**engine_config_raw) if engine_config_raw else None
    else:
        engine_config = None
    evaluation: dict = config_data.get("evaluation", {})
    max_discard_attempts = evaluation.get(
        "max_discard_attempts", CONFIG.evaluation.max_discard_attempts
    )
    if max_discard_attempts < 1:
        raise ConfigurationException(
            f"max_discard_attempts must be positive, got {max_discard_attempts}"
        )
    return RuntimeConfig(
        engine_dialect=engine,
        engine_config=engine_config,
        seed=evaluation.get("seed", CONFIG.seed),
        max_discard_attempts=max_discard_attempts,
        cases=evaluation.get("cases", DEFAULT_CASES),
    )
