"""Application environment types.

Environments:
- DEVELOPMENT: Local development, lenient admission limits
- TESTING: Automated test execution
- CI: Continuous integration
- PRODUCTION: Production deployment, strict admission limits
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
