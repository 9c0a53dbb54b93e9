import sys
import logging
from typing import Any, Optional

from loguru import logger

from odds_aggregator.config.settings import AppSettings, settings as default_settings

SENSITIVE_KEYS = ["key", "token", "password", "secret", "cookie"]


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return "********"


def make_sensitive_data_filter(app_settings: AppSettings):
    """Builds a loguru filter that masks secrets from the given settings."""
    secrets = [s for s in (app_settings.odds_api_key,) if s]

    def sensitive_data_filter(record: dict[str, Any]) -> bool:
        """Filter function to mask sensitive data in log records."""

        def mask_value(value: Any) -> Any:
            if isinstance(value, dict):
                masked = {}
                for k, v in value.items():
                    if isinstance(v, str) and any(
                        sk in str(k).lower() for sk in SENSITIVE_KEYS
                    ):
                        masked[k] = _mask(v)
                    else:
                        masked[k] = mask_value(v)
                return masked
            if isinstance(value, list):
                return [mask_value(item) for item in value]
            if isinstance(value, str):
                for secret in secrets:
                    value = value.replace(secret, "********")
            return value

        if "extra" in record and isinstance(record["extra"], dict):
            record["extra"].update(mask_value(record["extra"]))

        # API keys travel as query params, so they can show up in logged URLs
        for secret in secrets:
            if secret in record["message"]:
                record["message"] = record["message"].replace(secret, "********")

        return True

    return sensitive_data_filter


class InterceptHandler(logging.Handler):
    """Routes standard logging records (httpx, asyncio) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(app_settings: Optional[AppSettings] = None) -> None:
    """Configures Loguru logger based on application settings."""
    app_settings = app_settings or default_settings
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=app_settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=make_sensitive_data_filter(app_settings),
    )

    logger.info(f"Logging initialized with level: {app_settings.log_level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.info("Standard logging intercepted.")
