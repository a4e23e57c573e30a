import os
from dataclasses import dataclass, field
from pathlib import Path

from wordgrid.dictionary import ORACLE_KINDS


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DICTIONARY_PATH: Path = field(init=False)

    MIN_WORD_LENGTH: int = 3
    ORACLE: str = "probe"
    WORKERS: int = 1
    SEARCH_DEADLINE_SECONDS: float = 0.0

    MAX_RESULTS: int = 50
    MAX_LETTERS: int = 400

    NOTIFY_ENABLED: bool = False
    NTFY_TOPIC: str = "word-grid"
    NTFY_URL: str = "https://ntfy.sh"
    NOTIFY_WORDS_PER_GROUP: int = 10

    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        self.DICTIONARY_PATH = self.BASE_DIR / "dictionary.txt"

        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _coerce(getattr(self, fld), env_val))


# Fields that may be changed at runtime through the settings API
EDITABLE_FIELDS: dict[str, type] = {
    "MIN_WORD_LENGTH": int,
    "ORACLE": str,
    "WORKERS": int,
    "SEARCH_DEADLINE_SECONDS": float,
    "MAX_RESULTS": int,
    "NOTIFY_ENABLED": bool,
    "NTFY_TOPIC": str,
    "NOTIFY_WORDS_PER_GROUP": int,
    "DEBUG": bool,
}


def _coerce(current, value):
    if isinstance(current, bool):
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, Path):
        return Path(value)
    return str(value)


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, /, **changes) -> dict[str, str]:
    """Apply editable changes to cfg. Returns a mapping of field name to error.

    Valid fields are applied even when others in the same call are rejected.
    """
    errors: dict[str, str] = {}
    for name, value in changes.items():
        if name not in EDITABLE_FIELDS:
            errors[name] = "not an editable setting"
            continue
        try:
            coerced = _coerce(getattr(cfg, name), value)
        except (TypeError, ValueError) as e:
            errors[name] = f"expected {EDITABLE_FIELDS[name].__name__}: {e}"
            continue

        if name == "ORACLE" and coerced not in ORACLE_KINDS:
            errors[name] = f"must be one of {', '.join(ORACLE_KINDS)}"
            continue
        if name in ("MIN_WORD_LENGTH", "WORKERS") and coerced < 1:
            errors[name] = "must be at least 1"
            continue
        if name in ("MAX_RESULTS", "NOTIFY_WORDS_PER_GROUP", "SEARCH_DEADLINE_SECONDS") and coerced < 0:
            errors[name] = "must not be negative"
            continue

        setattr(cfg, name, coerced)
    return errors


settings = Settings()
