"""Container module - Centralized dependency injection.

Application-scoped singletons built from settings (composition root):
- Logging (structlog console adapter)
- Admission control (in-memory token bucket controller)

Usage:
    from trends_api.core.container import get_admission_controller, get_logger

    logger = get_logger()
    controller = get_admission_controller()

Tests call ``<factory>.cache_clear()`` to rebuild a singleton after changing
the environment.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from trends_api.core.config import get_settings

if TYPE_CHECKING:
    from trends_api.domain.protocols import AdmissionProtocol, LoggerProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection:
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from trends_api.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_admission_controller() -> "AdmissionProtocol":
    """Get admission controller singleton (app-scoped).

    Loads the preset chosen by settings (explicit RATE_LIMIT_PRESET or the
    environment default) and merges RATE_LIMIT_WHITELIST /
    RATE_LIMIT_BLACKLIST into it.

    Returns:
        AdmissionProtocol: Controller shared by every request.
    """
    from trends_api.infrastructure.rate_limit import AdmissionController, get_preset

    settings = get_settings()
    preset = settings.effective_rate_limit_preset
    config = get_preset(preset).with_ip_lists(
        whitelist=settings.whitelisted_ips,
        blacklist=settings.blacklisted_ips,
    )

    logger = get_logger()
    logger.info(
        "Admission controller configured",
        preset=preset.value,
        endpoint_policies=len(config.endpoint_policies),
        role_policies=len(config.role_policies),
        whitelist_size=len(config.whitelist),
        blacklist_size=len(config.blacklist),
    )
    return AdmissionController(
        config=config,
        logger=logger,
        idle_ttl_seconds=settings.rate_limit_idle_ttl_seconds,
        max_entries=settings.rate_limit_max_entries,
    )
