from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app() -> Flask:
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

    api_base = getattr(settings, "API_BASE")
    logger.info("settings=%s api=%s", settings_module, api_base)

    container = build_container(
        api_base=api_base,
        api_timeout=float(getattr(settings, "API_TIMEOUT", 10)),
        max_workers=int(getattr(settings, "FETCH_MAX_WORKERS", 8)),
        report_timeout=getattr(settings, "MONTHLY_REPORT_TIMEOUT", None),
        cache_enabled=bool(getattr(settings, "CACHE_ENABLED", False)),
        cache_ttl=float(getattr(settings, "CACHE_TTL", 60)),
        cache_max_entries=int(getattr(settings, "CACHE_MAX_ENTRIES", 1024)),
    )

    register_reports(app, container)

    return app
