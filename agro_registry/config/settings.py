# agro_registry/config/settings.py
# Loads environment variables and defines the application configuration.

from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv
import os
import logging
import sys
from urllib.parse import quote_plus # Para senhas na URL

# Determine the project root directory dynamically
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
dotenv_path = os.path.join(PROJECT_ROOT, '.env')
load_dotenv(dotenv_path=dotenv_path)

@dataclass
class Config:
    """
    Application configuration loaded from environment variables.
    Provides type hints and default values.
    """
    # Flask Settings
    SECRET_KEY: str = field(default_factory=lambda: os.environ.get('SECRET_KEY', 'default_secret_key_change_me_in_env'))
    APP_HOST: str = field(default_factory=lambda: os.environ.get('APP_HOST', '0.0.0.0'))
    APP_PORT: int = field(default_factory=lambda: int(os.environ.get('APP_PORT', 3000)))
    APP_DEBUG: bool = field(default_factory=lambda: os.environ.get('APP_DEBUG', 'True').lower() == 'true')
    LOG_LEVEL: str = field(default_factory=lambda: os.environ.get('LOG_LEVEL', 'DEBUG').upper())

    # --- Database Settings ---
    DB_TYPE: str = field(default_factory=lambda: os.environ.get('DB_TYPE', 'POSTGRES').upper())

    # PostgreSQL Specific Settings (read from .env)
    POSTGRES_HOST: str = field(default_factory=lambda: os.environ.get('POSTGRES_HOST', 'localhost'))
    POSTGRES_PORT: int = field(default_factory=lambda: int(os.environ.get('POSTGRES_PORT', 5432)))
    POSTGRES_USER: str = field(default_factory=lambda: os.environ.get('POSTGRES_USER', ''))
    POSTGRES_PASSWORD: str = field(default_factory=lambda: os.environ.get('POSTGRES_PASSWORD', ''))
    POSTGRES_DB: str = field(default_factory=lambda: os.environ.get('POSTGRES_DB', ''))

    # SQLite path (DB_TYPE=SQLITE), relative paths resolve against PROJECT_ROOT
    DATABASE_PATH: Optional[str] = field(default_factory=lambda: os.environ.get('DATABASE_PATH'))

    # --- SQLAlchemy Database URL ---
    # Constructed based on the DB_TYPE and specific settings
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # --- Redis (cache backend) ---
    REDIS_HOST: str = field(default_factory=lambda: os.environ.get('REDIS_HOST', 'localhost'))
    REDIS_PORT: int = field(default_factory=lambda: int(os.environ.get('REDIS_PORT', 6379)))
    REDIS_DB: int = field(default_factory=lambda: int(os.environ.get('REDIS_DB', 0)))
    REDIS_PASSWORD: Optional[str] = field(default_factory=lambda: os.environ.get('REDIS_PASSWORD') or None)
    REDIS_SOCKET_TIMEOUT: float = field(default_factory=lambda: float(os.environ.get('REDIS_SOCKET_TIMEOUT', 5)))

    # --- Cache TTLs (seconds) ---
    CACHE_LIST_TTL_SECONDS: int = field(default_factory=lambda: int(os.environ.get('CACHE_LIST_TTL_SECONDS', 3600)))
    DASHBOARD_CACHE_TTL_SECONDS: int = field(default_factory=lambda: int(os.environ.get('DASHBOARD_CACHE_TTL_SECONDS', 600)))

    def __post_init__(self):
        # Validate log level
        valid_levels = list(logging._nameToLevel.keys())
        if self.LOG_LEVEL not in valid_levels:
             print(f"Warning: Invalid LOG_LEVEL '{self.LOG_LEVEL}'. Valid levels: {valid_levels}. Defaulting to DEBUG.", file=sys.stderr)
             self.LOG_LEVEL = 'DEBUG'

        # --- Build SQLAlchemy Database URI ---
        if self.DB_TYPE == 'POSTGRES':
            if not all([self.POSTGRES_HOST, self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
                print("Warning: Missing PostgreSQL connection details in environment variables. Database connection will likely fail.", file=sys.stderr)
                self.SQLALCHEMY_DATABASE_URI = None
            else:
                 encoded_password = quote_plus(self.POSTGRES_PASSWORD)
                 self.SQLALCHEMY_DATABASE_URI = f"postgresql+psycopg://{self.POSTGRES_USER}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        elif self.DB_TYPE == 'SQLITE':
             if self.DATABASE_PATH:
                  abs_path = os.path.join(PROJECT_ROOT, self.DATABASE_PATH) if not os.path.isabs(self.DATABASE_PATH) else self.DATABASE_PATH
                  os.makedirs(os.path.dirname(abs_path), exist_ok=True)
                  self.SQLALCHEMY_DATABASE_URI = f"sqlite:///{abs_path}"
             else:
                  print("Warning: DB_TYPE is SQLITE but DATABASE_PATH is not set.", file=sys.stderr)
                  self.SQLALCHEMY_DATABASE_URI = None
        else:
             print(f"Warning: Unsupported DB_TYPE '{self.DB_TYPE}'. No database URI configured.", file=sys.stderr)
             self.SQLALCHEMY_DATABASE_URI = None

        if self.CACHE_LIST_TTL_SECONDS < 1:
            print(f"Warning: CACHE_LIST_TTL_SECONDS ({self.CACHE_LIST_TTL_SECONDS}) is invalid. Setting to default 3600.", file=sys.stderr)
            self.CACHE_LIST_TTL_SECONDS = 3600
        if self.DASHBOARD_CACHE_TTL_SECONDS < 1:
            print(f"Warning: DASHBOARD_CACHE_TTL_SECONDS ({self.DASHBOARD_CACHE_TTL_SECONDS}) is invalid. Setting to default 600.", file=sys.stderr)
            self.DASHBOARD_CACHE_TTL_SECONDS = 600

    @property
    def REDIS_URL(self) -> str:
        """Connection URL for the cache backend. Carries the password, never log it."""
        auth = f":{quote_plus(self.REDIS_PASSWORD)}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

# Singleton instance, created by load_config
_config_instance: Optional[Config] = None

def load_config() -> Config:
    """Loads or returns the singleton Config instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
        # Log loaded config values (mask sensitive ones)
        print("--- Configuration Loaded ---")
        print(f"  APP_HOST: {_config_instance.APP_HOST}")
        print(f"  APP_PORT: {_config_instance.APP_PORT}")
        print(f"  APP_DEBUG: {_config_instance.APP_DEBUG}")
        print(f"  LOG_LEVEL: {_config_instance.LOG_LEVEL}")
        print(f"  DB_TYPE: {_config_instance.DB_TYPE}")
        db_uri_log = str(_config_instance.SQLALCHEMY_DATABASE_URI)
        if _config_instance.POSTGRES_PASSWORD:
             db_uri_log = db_uri_log.replace(quote_plus(_config_instance.POSTGRES_PASSWORD), '********')
        print(f"  SQLALCHEMY_DATABASE_URI: {db_uri_log}")
        print(f"  REDIS: {_config_instance.REDIS_HOST}:{_config_instance.REDIS_PORT}/{_config_instance.REDIS_DB}")
        print(f"  CACHE_LIST_TTL_SECONDS: {_config_instance.CACHE_LIST_TTL_SECONDS}")
        print(f"  DASHBOARD_CACHE_TTL_SECONDS: {_config_instance.DASHBOARD_CACHE_TTL_SECONDS}")
        print("--------------------------")
    return _config_instance

# Expose the singleton instance directly
config = load_config()
