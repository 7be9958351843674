from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        api_config = getattr(settings, "API_CONFIG")
        logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))
        container = build_container(
            api_config=api_config,
            default_hours=float(getattr(settings, "DEFAULT_WORKING_HOURS", 8)),
            present_day_policy=getattr(settings, "PRESENT_DAY_POLICY", "distinct_date"),
            day_cell_cap=int(getattr(settings, "DAY_CELL_RECORD_CAP", 2)),
        )

    register_attendance(app, container)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app
