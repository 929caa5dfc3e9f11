import os

_SETTINGS_BY_ENV = {
    "dev": "config.development",
    "development": "config.development",
    "test": "config.testing",
    "testing": "config.testing",
    "prod": "config.production",
    "production": "config.production",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for the current `APP_ENV`.

    `TIMECLOCK_SETTINGS` names a custom module and wins over `APP_ENV`;
    unknown environments fall back to development.
    """
    custom = os.getenv("TIMECLOCK_SETTINGS", "").strip()
    if custom:
        return custom

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
