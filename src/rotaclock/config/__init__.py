import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "rotaclock.config.production"

    if env in {"test", "testing"}:
        return "rotaclock.config.testing"

    return "rotaclock.config.development"
