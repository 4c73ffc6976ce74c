"""Logging adapters implementing LoggerProtocol."""

from trends_api.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
