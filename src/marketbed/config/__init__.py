"""
marketbed configuration.

Provides:
- Pydantic-based settings (environment variables, .env files)
- YAML market catalogs merged over the default market
"""

from marketbed.config.loader import load_market_config, parse_market, validate_market
from marketbed.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "load_market_config",
    "parse_market",
    "validate_market",
]
