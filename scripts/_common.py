from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from workforce_system.container import Container, build_container


def load_container() -> Container:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return build_container(
        backend_config=settings.BACKEND_CONFIG,
        timezone=settings.TIMEZONE,
        minimum_valid_hours=float(settings.MINIMUM_VALID_HOURS),
    )
