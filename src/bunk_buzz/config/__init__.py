import os


def get_settings_module() -> str:
    # APP_ENV decides which settings module is loaded, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "bunk_buzz.config.production"

    if env in {"test", "testing"}:
        return "bunk_buzz.config.testing"

    return "bunk_buzz.config.development"
