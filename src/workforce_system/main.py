from __future__ import annotations

import importlib
import logging
from typing import Optional

import requests
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .breaks.controller import register as register_breaks
from .common.web import install
from .container import build_container
from .core.constants import DEFAULT_MINIMUM_VALID_HOURS, DEFAULT_TIMEZONE
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users
from .wifi.controller import register as register_wifi

logger = logging.getLogger(__name__)


def create_app(*, session: Optional[requests.Session] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    backend_config = getattr(settings, "BACKEND_CONFIG")
    logger.info("settings=%s backend=%s", settings_module, backend_config.get("url"))

    container = build_container(
        backend_config=backend_config,
        timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        minimum_valid_hours=float(getattr(settings, "MINIMUM_VALID_HOURS", DEFAULT_MINIMUM_VALID_HOURS)),
        session=session,
    )
    app.extensions["workforce_container"] = container

    install(app)
    register_users(app, container)
    register_attendance(app, container)
    register_breaks(app, container)
    register_leave(app, container)
    register_payroll(app, container)
    register_wifi(app, container)

    return app
