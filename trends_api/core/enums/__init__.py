"""Core enums package.

Usage:
    from trends_api.core.enums import ErrorCode, Environment
"""

from trends_api.core.enums.environment import Environment
from trends_api.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
