"""
config/settings.py - Configuration management
"""

import os
import json
from typing import Dict, List, Any, cast


class ConfigFile:
    """Base configuration class backed by a JSON file"""

    # Load from environment or config file
    _config_data = None

    @classmethod
    def _load_config(cls) -> Dict:
        """Load configuration from file"""
        if cls._config_data is None:
            config_path = os.getenv("CONFIG_PATH", "config.json")
            try:
                with open(config_path, "r") as f:
                    cls._config_data = json.load(f)
            except FileNotFoundError:
                cls._config_data = cls._get_default_config()
        return cls._config_data

    @classmethod
    def _get_default_config(cls) -> Dict:
        """Default configuration"""
        return {
            "history": {
                "table_prefix": "",
                "verbose_diagnostics": False,
            },
            "context": {
                # Stays well under MySQL's default max_allowed_packet (16MB)
                "batch_ceiling": 500000,
                "row_overhead": 100,
            },
            "privacy": {
                "anonymize_ip": True,
                "ip_header_names": [
                    "HTTP_CLIENT_IP",
                    "HTTP_X_FORWARDED_FOR",
                    "HTTP_X_FORWARDED",
                    "HTTP_X_CLUSTER_CLIENT_IP",
                    "HTTP_FORWARDED_FOR",
                    "HTTP_FORWARDED",
                ],
            },
            "i18n": {
                "locale_dir": "locale",
                "language": "en",
                "text_domain": "auditlog",
            },
            "data": {
                "database_path": "data/history.db",
            },
            "api": {
                # Note: Development mode overrides host to 127.0.0.1 for security
                "host": "0.0.0.0",
                "port": 5000,
                "debug": False,
                "cors_enabled": True,
            },
        }

    # Configuration properties as class methods
    @classmethod
    def TABLE_PREFIX(cls) -> str:
        return os.getenv("TABLE_PREFIX", cls._load_config()["history"]["table_prefix"])

    @classmethod
    def VERBOSE_DIAGNOSTICS(cls) -> bool:
        env_value = os.getenv("VERBOSE_DIAGNOSTICS")
        if env_value is not None:
            return env_value.lower() == "true"
        return cast(bool, cls._load_config()["history"]["verbose_diagnostics"])

    @classmethod
    def CONTEXT_BATCH_CEILING(cls) -> int:
        return int(cls._load_config()["context"]["batch_ceiling"])

    @classmethod
    def CONTEXT_ROW_OVERHEAD(cls) -> int:
        return int(cls._load_config()["context"]["row_overhead"])

    @classmethod
    def ANONYMIZE_IP(cls) -> bool:
        return cast(bool, cls._load_config()["privacy"]["anonymize_ip"])

    @classmethod
    def IP_HEADER_NAMES(cls) -> List[str]:
        return cast(List[str], cls._load_config()["privacy"]["ip_header_names"])

    @classmethod
    def LOCALE_DIR(cls) -> str:
        return os.getenv("LOCALE_DIR", cls._load_config()["i18n"]["locale_dir"])

    @classmethod
    def LANGUAGE(cls) -> str:
        return os.getenv("LANGUAGE_CODE", cls._load_config()["i18n"]["language"])

    @classmethod
    def TEXT_DOMAIN(cls) -> str:
        return cast(str, cls._load_config()["i18n"]["text_domain"])

    @classmethod
    def DATABASE_PATH(cls) -> str:
        return os.getenv("DATABASE_PATH", cls._load_config()["data"]["database_path"])

    @classmethod
    def API_HOST(cls) -> str:
        return os.getenv("HOST", cls._load_config()["api"]["host"])

    @classmethod
    def API_PORT(cls) -> int:
        return int(os.getenv("PORT", cls._load_config()["api"]["port"]))

    @classmethod
    def get(cls, path: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated path"""
        keys = path.split(".")
        value = cls._load_config()

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @classmethod
    def validate_config(cls) -> List[str]:
        """Validate configuration and return list of issues"""
        issues = []
        config = cls._load_config()

        context = config.get("context", {})
        ceiling = context.get("batch_ceiling", 500000)
        overhead = context.get("row_overhead", 100)
        if not isinstance(ceiling, int) or ceiling <= 0:
            issues.append("Invalid context.batch_ceiling")
        if not isinstance(overhead, int) or overhead < 0:
            issues.append("Invalid context.row_overhead")
        elif isinstance(ceiling, int) and overhead >= ceiling:
            issues.append("context.row_overhead must be smaller than context.batch_ceiling")

        headers = config.get("privacy", {}).get("ip_header_names", [])
        if not isinstance(headers, list) or not all(isinstance(h, str) for h in headers):
            issues.append("privacy.ip_header_names must be a list of strings")

        prefix = config.get("history", {}).get("table_prefix", "")
        if not isinstance(prefix, str) or not (prefix == "" or prefix.replace("_", "").isalnum()):
            issues.append("history.table_prefix may only contain letters, digits and underscores")

        return issues

    @classmethod
    def save_config(cls, config_data: Dict) -> bool:
        """Save configuration to file"""
        try:
            config_path = os.getenv("CONFIG_PATH", "config.json")
            with open(config_path, "w") as f:
                json.dump(config_data, f, indent=2)
            # Clear cached config so next access reloads from file
            cls._config_data = None
            return True
        except OSError:
            return False


class Config(ConfigFile):
    """Configuration class with database and authentication settings

    Database configuration via environment variables:
    - DATABASE_TYPE: sqlite (default), postgresql, or mysql
    - DATABASE_URL: full connection string (optional)
    - DB_USER, DB_PASSWORD, DB_HOST, DB_PORT, DB_NAME: individual params
    """

    # Database configuration
    DATABASE_TYPE: str = os.getenv("DATABASE_TYPE", "sqlite")
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")

    # Database connection pool settings (for PostgreSQL/MySQL)
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "20"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "40"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))

    # Individual database connection parameters
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "auditlog")

    # SQL debugging
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "False").lower() == "true"

    # JWT signing key for the identity middleware
    JWT_SECRET_KEY: str = os.getenv(
        "JWT_SECRET_KEY", "your-secret-key-change-in-production-12345"
    )


# Environment-specific configurations
class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True
    TESTING = False

    @classmethod
    def DATABASE_PATH(cls) -> str:
        return "data/dev_history.db"

    @classmethod
    def VERBOSE_DIAGNOSTICS(cls) -> bool:
        return True

    @classmethod
    def API_PORT(cls) -> int:
        return 5000


class ProductionConfig(Config):
    """Production configuration"""

    DEBUG = False
    TESTING = False

    @classmethod
    def API_PORT(cls) -> int:
        return int(os.getenv("PORT", 8080))


class TestingConfig(Config):
    """Testing configuration"""

    DEBUG = True
    TESTING = True

    @classmethod
    def DATABASE_PATH(cls) -> str:
        return "data/test_history.db"

    @classmethod
    def ANONYMIZE_IP(cls) -> bool:
        return True


def get_config() -> type[Config]:
    """Get configuration based on environment"""
    env = os.getenv("FLASK_ENV", "production")

    if env == "development":
        return DevelopmentConfig
    elif env == "testing":
        return TestingConfig
    else:
        return ProductionConfig
