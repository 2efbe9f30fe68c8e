import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./auth_store.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./auth_store.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    REFRESH_TOKEN_TTL_SECONDS = int(data.get("REFRESH_TOKEN_TTL_SECONDS", 2_592_000))
    # "reject" or "supersede"
    REFRESH_TOKEN_ISSUE_POLICY = data.get("REFRESH_TOKEN_ISSUE_POLICY", "reject")
    TOKEN_RETENTION_DAYS = int(data.get("TOKEN_RETENTION_DAYS", 30))
