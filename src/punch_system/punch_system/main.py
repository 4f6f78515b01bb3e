from __future__ import annotations

import importlib
import logging
from datetime import datetime
from typing import Callable

from dotenv import load_dotenv

from config import get_settings_module

from .common.datetime_utils import utc_now
from .container import Container, Repositories, build_container
from .core.settings import AppSettings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_settings() -> AppSettings:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    return AppSettings.from_module(settings)


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)


def create_container(
    repos: Repositories,
    *,
    settings: AppSettings | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> Container:
    """Build the service graph over the given storage adapters."""

    settings = settings or load_settings()
    configure_logging(settings)
    if settings.debug:
        logger.debug(
            "[punch-system] timezone=%s max_late=%s max_overtime=%s",
            settings.app_timezone, settings.max_late_minutes, settings.max_overtime_minutes,
        )
    return build_container(repos=repos, settings=settings, clock=clock)
