import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def setting(key, default):
    """Environment variable first, then env.yaml, then the default"""
    value = os.environ.get(key)
    if value is None:
        return data.get(key, default)
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ApplicationConfig:
    # Database
    DB_TYPE = setting("DB_TYPE", "sqlite")
    DATABASE_URL = setting("DATABASE_URL", "sqlite+aiosqlite:///./commerce.db")
    DB_POOL_SIZE = setting("DB_POOL_SIZE", 20)
    DB_AUTO_CREATE = setting("DB_AUTO_CREATE", True)

    # HTTP
    API_PREFIX = setting("API_PREFIX", "/api")
    PORT = setting("PORT", 8000)
    API_HOST = setting("API_HOST", "0.0.0.0")
    CORS_ORIGINS = setting("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = setting("CORS_ALLOW_CREDENTIALS", True)
    MAX_FILE_SIZE = setting("MAX_FILE_SIZE", 10 * 1024 * 1024)

    # Logging
    LOG_LEVEL = setting("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = setting("ENABLE_LOGGING_MIDDLEWARE", True)
    NODE_ENV = setting("NODE_ENV", "development")

    # Auth
    ADMIN_JWT_SECRET = setting("ADMIN_JWT_SECRET", "dev-admin-secret-change-in-production")
    TENANT_JWT_SECRET = setting("TENANT_JWT_SECRET", "dev-tenant-secret-change-in-production")
    JWT_EXPIRES_HOURS = setting("JWT_EXPIRES_HOURS", 24)
    BCRYPT_ROUNDS = setting("BCRYPT_ROUNDS", 10)
    SUPER_ADMIN_EMAIL = setting("SUPER_ADMIN_EMAIL", "admin@example.com")
    SUPER_ADMIN_PASSWORD = setting("SUPER_ADMIN_PASSWORD", "admin123456")
    SUPER_ADMIN_API_KEY = setting("SUPER_ADMIN_API_KEY", "")

    # Rate limiting
    RATE_LIMIT_WINDOW_SECONDS = setting("RATE_LIMIT_WINDOW_SECONDS", 60)
    RATE_LIMIT_MAX_REQUESTS = setting("RATE_LIMIT_MAX_REQUESTS", 100)
    # Peers allowed to report the client address through X-Forwarded-For
    TRUSTED_PROXIES = setting("TRUSTED_PROXIES", [])

    # Plugins and caching
    PLUGIN_DIR = setting("PLUGIN_DIR", os.path.join(ROOT_PATH, "plugins"))
    TENANT_CACHE_TTL_SECONDS = setting("TENANT_CACHE_TTL_SECONDS", 30)
