"""
Configuration settings for the inbox unsubscriber.
"""

import os
from pathlib import Path
from typing import Tuple

from ..email_processor.unsubscribe.constants import URL_SHORTENERS


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Configuration settings."""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///unsubscriber.db')

    # Run mode. Dry run stays on unless explicitly disabled.
    DRY_RUN = _env_flag('DRY_RUN', 'true')
    MIN_CONFIDENCE = float(os.getenv('MIN_CONFIDENCE', '0.7'))

    # HTTP executor settings
    REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '10'))
    RATE_LIMIT_DELAY = float(os.getenv('RATE_LIMIT_DELAY', '1.0'))
    USER_AGENT = os.getenv('USER_AGENT', 'Mozilla/5.0 (compatible; UnsubscribeBot/1.0)')

    # Browser automation settings (milliseconds)
    BROWSER_TIMEOUT_MS = int(os.getenv('BROWSER_TIMEOUT_MS', '30000'))
    BROWSER_STRATEGY_TIMEOUT_MS = int(os.getenv('BROWSER_STRATEGY_TIMEOUT_MS', '5000'))
    BROWSER_SETTLE_MS = int(os.getenv('BROWSER_SETTLE_MS', '2000'))
    # Chromium's sandbox cannot start as root inside most containers
    BROWSER_SANDBOX = _env_flag('BROWSER_SANDBOX', 'true')

    @classmethod
    def shortener_domains(cls) -> Tuple[str, ...]:
        """Deny-listed hosts, overridable via a comma separated SHORTENER_DOMAINS."""
        override = os.getenv('SHORTENER_DOMAINS')
        if not override:
            return URL_SHORTENERS
        return tuple(domain.strip().lower() for domain in override.split(',') if domain.strip())

    @classmethod
    def get_data_dir(cls) -> Path:
        """Get the data directory for storing the database and logs."""
        data_dir = Path(os.getenv('DATA_DIR', Path.cwd() / 'data'))
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    @classmethod
    def get_database_path(cls) -> str:
        """Database URL with relative SQLite paths placed in the data directory."""
        if cls.DATABASE_URL.startswith('sqlite:///') and ':memory:' not in cls.DATABASE_URL:
            db_file = cls.DATABASE_URL[len('sqlite:///'):]
            if not os.path.isabs(db_file):
                return f"sqlite:///{cls.get_data_dir() / db_file}"
        return cls.DATABASE_URL


def load_config_from_env_file(env_file: str = '.env') -> bool:
    """Load environment variables from a dotenv file and refresh Config."""
    from dotenv import load_dotenv

    env_path = Path(env_file)
    if not env_path.exists():
        return False

    load_dotenv(env_path)
    Config.DATABASE_URL = os.getenv('DATABASE_URL', Config.DATABASE_URL)
    Config.DRY_RUN = _env_flag('DRY_RUN', 'true')
    Config.MIN_CONFIDENCE = float(os.getenv('MIN_CONFIDENCE', str(Config.MIN_CONFIDENCE)))
    Config.REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', str(Config.REQUEST_TIMEOUT)))
    Config.RATE_LIMIT_DELAY = float(os.getenv('RATE_LIMIT_DELAY', str(Config.RATE_LIMIT_DELAY)))
    Config.USER_AGENT = os.getenv('USER_AGENT', Config.USER_AGENT)
    Config.BROWSER_TIMEOUT_MS = int(os.getenv('BROWSER_TIMEOUT_MS', str(Config.BROWSER_TIMEOUT_MS)))
    Config.BROWSER_STRATEGY_TIMEOUT_MS = int(
        os.getenv('BROWSER_STRATEGY_TIMEOUT_MS', str(Config.BROWSER_STRATEGY_TIMEOUT_MS))
    )
    Config.BROWSER_SETTLE_MS = int(os.getenv('BROWSER_SETTLE_MS', str(Config.BROWSER_SETTLE_MS)))
    Config.BROWSER_SANDBOX = _env_flag('BROWSER_SANDBOX', 'true' if Config.BROWSER_SANDBOX else 'false')
    return True
