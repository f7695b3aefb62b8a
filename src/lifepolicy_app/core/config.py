"""Configuration loader for database, keys, logging and policy rules."""

from __future__ import annotations

import logging
import os
import secrets
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from lifepolicy_app.core.crypto import CryptoService


@dataclass(frozen=True)
class DatabaseConfig:
    path: str
    key_env: str
    allow_sqlite_fallback: bool


@dataclass(frozen=True)
class EncryptionConfig:
    key_env: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    retention_days: int


@dataclass(frozen=True)
class PolicyRules:
    """Business constants used by the pricing, accrual and loan rules."""

    whole_life_prefix: str = "WHOLE_LIFE"
    cash_value_interest_rate: Decimal = Decimal("0.04")
    expense_ratio: Decimal = Decimal("0.15")
    max_loan_ratio: Decimal = Decimal("0.9")
    loan_interest_rate: Decimal = Decimal("0.055")
    min_age: int = 18
    max_age: int = 85


@dataclass(frozen=True)
class AppConfig:
    database: DatabaseConfig
    encryption: EncryptionConfig
    logging: LoggingConfig
    rules: PolicyRules


DEFAULT_RULES = PolicyRules()
DEFAULT_CONFIG_REL_PATH = Path("config/lifepolicy.yaml")
DEFAULT_DB_KEY_ENV = "LIFEPOLICY_DB_KEY"
DEFAULT_ENCRYPTION_KEY_ENV = "LIFEPOLICY_ENCRYPTION_KEY"
RUNTIME_ENV_REL_PATH = Path("config/runtime.env")
_RUNTIME_ENV_LOADED = False


def _project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    """Parse ``KEY=value`` or ``export KEY=value``, ignoring comments."""
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export ") :]
    if "=" not in line:
        return None

    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return key, value


def _iter_env_candidates() -> list[Path]:
    """Return local files that may hold runtime keys, first match wins per key."""
    candidates: list[Path] = []
    for root in (Path.cwd(), _project_root()):
        for path in (root / ".env.local", root / RUNTIME_ENV_REL_PATH):
            resolved = path.resolve()
            if resolved not in candidates:
                candidates.append(resolved)
    return candidates


def _load_env_file(path: Path) -> None:
    if not path.is_file():
        return
    with path.open("r", encoding="utf-8") as file:
        for line in file:
            parsed = _parse_env_line(line)
            if parsed and parsed[0] not in os.environ:
                os.environ[parsed[0]] = parsed[1]


def _ensure_runtime_env_loaded() -> None:
    global _RUNTIME_ENV_LOADED
    if _RUNTIME_ENV_LOADED:
        return
    for path in _iter_env_candidates():
        _load_env_file(path)
    _RUNTIME_ENV_LOADED = True


def _bootstrap_keys(db_path: str | None = None) -> None:
    """Generate runtime keys on first start; refuse when a database already exists."""
    if os.getenv(DEFAULT_DB_KEY_ENV) and os.getenv(DEFAULT_ENCRYPTION_KEY_ENV):
        return

    runtime_env = _project_root() / RUNTIME_ENV_REL_PATH
    if db_path and Path(db_path).exists() and not runtime_env.exists():
        raise RuntimeError(
            "Runtime key file is missing while the policy database exists. "
            f"Restore it or set {DEFAULT_DB_KEY_ENV}/{DEFAULT_ENCRYPTION_KEY_ENV}."
        )

    db_key = os.getenv(DEFAULT_DB_KEY_ENV) or secrets.token_urlsafe(48)
    encryption_key = os.getenv(DEFAULT_ENCRYPTION_KEY_ENV) or CryptoService.generate_base64_key()
    os.environ[DEFAULT_DB_KEY_ENV] = db_key
    os.environ[DEFAULT_ENCRYPTION_KEY_ENV] = encryption_key

    runtime_env.parent.mkdir(parents=True, exist_ok=True)
    runtime_env.write_text(
        f"{DEFAULT_DB_KEY_ENV}='{db_key}'\n{DEFAULT_ENCRYPTION_KEY_ENV}='{encryption_key}'\n",
        encoding="utf-8",
    )


def ensure_runtime_keys(db_path: str | None = None) -> None:
    """Load or bootstrap runtime keys for the configured database."""
    _ensure_runtime_env_loaded()
    _bootstrap_keys(db_path)


def get_required_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    _ensure_runtime_env_loaded()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Required environment variable is missing: {name}")
    return value


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv("LIFEPOLICY_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    candidates = [Path.cwd() / DEFAULT_CONFIG_REL_PATH, _project_root() / DEFAULT_CONFIG_REL_PATH]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def _decimal_setting(raw: dict[str, Any], key: str, default: Decimal) -> Decimal:
    # YAML may hand back floats; go through str so 0.04 stays 0.04.
    value = raw.get(key)
    return default if value is None else Decimal(str(value))


def _load_rules(raw: dict[str, Any] | None) -> PolicyRules:
    raw = raw or {}
    rules = PolicyRules(
        whole_life_prefix=str(raw.get("whole_life_prefix", DEFAULT_RULES.whole_life_prefix)),
        cash_value_interest_rate=_decimal_setting(
            raw, "cash_value_interest_rate", DEFAULT_RULES.cash_value_interest_rate
        ),
        expense_ratio=_decimal_setting(raw, "expense_ratio", DEFAULT_RULES.expense_ratio),
        max_loan_ratio=_decimal_setting(raw, "max_loan_ratio", DEFAULT_RULES.max_loan_ratio),
        loan_interest_rate=_decimal_setting(
            raw, "loan_interest_rate", DEFAULT_RULES.loan_interest_rate
        ),
        min_age=int(raw.get("min_age", DEFAULT_RULES.min_age)),
        max_age=int(raw.get("max_age", DEFAULT_RULES.max_age)),
    )
    if rules.min_age > rules.max_age:
        raise RuntimeError("rules.min_age must not exceed rules.max_age")
    return rules


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the app configuration from YAML."""
    path = config_path or resolve_default_config_path()
    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or {}

    logging_raw = raw.get("logging") or {}
    return AppConfig(
        database=DatabaseConfig(
            path=str(raw["db"]["path"]),
            key_env=str(raw["db"].get("key_env", DEFAULT_DB_KEY_ENV)),
            allow_sqlite_fallback=bool(raw["db"].get("allow_sqlite_fallback", False)),
        ),
        encryption=EncryptionConfig(
            key_env=str(raw["encryption"].get("key_env", DEFAULT_ENCRYPTION_KEY_ENV)),
        ),
        logging=LoggingConfig(
            level=str(logging_raw.get("level", "INFO")).upper(),
            retention_days=int(logging_raw.get("retention_days", 1095)),
        ),
        rules=_load_rules(raw.get("rules")),
    )


def configure_logging(config: LoggingConfig) -> None:
    """Apply the configured level to the package logger."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("lifepolicy_app").setLevel(config.level)
