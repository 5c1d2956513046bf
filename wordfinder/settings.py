import os
from dataclasses import dataclass


@dataclass
class Settings:
    TOP_K: int = 10
    MAX_GRID_SIDE: int = 64

    MIN_WORKERS: int = 1
    MAX_WORKERS: int = 10

    DEFAULT_EXECUTION_MODE: str = "sequential"
    DEFAULT_WORKERS: int = 3

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _coerce(getattr(self, fld), env_val))


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Fields that may be changed while the server is running
EDITABLE_FIELDS: dict[str, type] = {
    "DEFAULT_EXECUTION_MODE": str,
    "DEFAULT_WORKERS": int,
    "LOG_LEVEL": str,
    "DEBUG": bool,
}


def _coerce(current, value):
    if isinstance(current, bool):
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes")
    if isinstance(current, (int, float)) and isinstance(value, bool):
        raise TypeError(f"expected {type(current).__name__}, got bool")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return str(value)


def effective_log_level(cfg: Settings) -> str:
    """DEBUG forces debug output regardless of LOG_LEVEL."""
    return "DEBUG" if cfg.DEBUG else cfg.LOG_LEVEL.upper()


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, values: dict) -> dict[str, str]:
    """Apply editable values to cfg. Returns {field: error} for rejected ones."""
    errors: dict[str, str] = {}
    for name, value in values.items():
        if name not in EDITABLE_FIELDS:
            if hasattr(cfg, name):
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue
        try:
            coerced = _coerce(getattr(cfg, name), value)
        except (TypeError, ValueError) as e:
            errors[name] = f"invalid value {value!r}: {e}"
            continue
        if name == "DEFAULT_WORKERS" and not cfg.MIN_WORKERS <= coerced <= cfg.MAX_WORKERS:
            errors[name] = f"must be between {cfg.MIN_WORKERS} and {cfg.MAX_WORKERS}"
            continue
        if name == "DEFAULT_EXECUTION_MODE" and coerced.lower() not in ("sequential", "pooled"):
            errors[name] = "must be 'sequential' or 'pooled'"
            continue
        if name == "LOG_LEVEL" and coerced.upper() not in LOG_LEVELS:
            errors[name] = f"must be one of {', '.join(LOG_LEVELS)}"
            continue
        setattr(cfg, name, coerced)
    return errors


settings = Settings()
