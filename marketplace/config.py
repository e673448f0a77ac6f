"""Default Flask configuration, overridable from the environment."""

import os

from .utils.constants import PLATFORM_FEE


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    # Pickle file backing the store; empty keeps everything in memory
    DATA_PATH = os.getenv("DATA_PATH", "")

    PLATFORM_FEE = int(os.getenv("PLATFORM_FEE", PLATFORM_FEE))

    # Shared secret for the scheduled sweep endpoint; empty disables header auth
    CRON_SECRET = os.getenv("CRON_SECRET", "")

    # Zone assumed for booking dates given without an offset
    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
