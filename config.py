import os
from pathlib import Path

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / ".env"

_TRUTHY = {"1", "true", "yes", "y"}
_env_loaded = False


def _ensure_env_loaded() -> None:
    global _env_loaded
    if not _env_loaded:
        # real environment variables win over .env entries
        load_dotenv(dotenv_path=ENV_PATH, override=False)
        _env_loaded = True


def get_env(
    name: str, default: str | None = None, required: bool = False
) -> str | None:
    """Read a setting; blank values count as unset."""
    _ensure_env_loaded()
    value = (os.environ.get(name) or "").strip()
    if value:
        return value
    if required:
        raise SystemExit(f"{name} env var is required")
    return default


def get_float_env(name: str, default: float) -> float:
    value = get_env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise SystemExit(f"{name} must be a number, got {value!r}") from exc


def get_bool_env(name: str, default: bool = False) -> bool:
    value = get_env(name)
    if value is None:
        return default
    return value.lower() in _TRUTHY


DEFAULT_QTY = 10.0

QUOTE_CONFIG = {
    "timeout_seconds": get_float_env("QUOTE_TIMEOUT_SECONDS", 5.0),
    "cooldown_seconds": get_float_env("QUOTE_COOLDOWN_SECONDS", 2.0),
    "parallel_fetch": get_bool_env("QUOTE_PARALLEL_FETCH"),
    "coinbase_url": get_env("COINBASE_BOOK_URL"),
    "gemini_url": get_env("GEMINI_BOOK_URL"),
}
