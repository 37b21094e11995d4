"""Startup-time config snapshot with secrets redacted."""

from pydantic_settings import BaseSettings

from paygate.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def config_snapshot(config: BaseSettings, gateways: list[str]) -> dict[str, object]:
    """Settings plus registered gateways; secret-like fields are masked."""

    snapshot: dict[str, object] = {}
    for field, value in config.model_dump().items():
        if value is not None and any(marker in field for marker in SECRET_MARKERS):
            value = "<redacted>"
        snapshot[field] = value
    snapshot["gateways"] = gateways
    return snapshot


def log_startup_config(config: BaseSettings, gateways: list[str]) -> dict[str, object]:
    snapshot = config_snapshot(config, gateways)
    logger.info("startup_config=%s", snapshot)
    return snapshot
