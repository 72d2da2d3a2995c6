import os

_ENVIRONMENTS = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for this process.

    ``WORKFORCE_SETTINGS`` names a module outright; otherwise ``APP_ENV``
    picks one of the bundled ones and anything unrecognised is development.
    """
    explicit = os.getenv("WORKFORCE_SETTINGS", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENVIRONMENTS.get(env, "config.development")
