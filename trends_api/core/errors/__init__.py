"""Core errors package.

Usage:
    from trends_api.core.errors import DomainError
"""

from trends_api.core.errors.domain_error import DomainError

__all__ = ["DomainError"]
