"""
Data Provider Package

Capability interface for the upstream mortgage APIs and its two
implementations: a live HTTP client and a deterministic synthetic fallback.
"""

import logging
from typing import Dict

import project_config
from .base import DataProvider, NESTED_KEYS, RESPONSE_KEYS, missing_fields
from .exceptions import DataProviderError, TokenError, UpstreamError
from .synthetic import SyntheticDataProvider
from .live import LiveDataProvider
from .auth import TokenManager

logger = logging.getLogger("data-provider")

# One instance per kind so the live provider's token cache and connection pool are reused
_PROVIDERS: Dict[str, DataProvider] = {}


def get_data_provider(kind: str = None) -> DataProvider:
    """
    Return the configured data provider

    Args:
        kind: "live" or "synthetic"; defaults to the DATA_PROVIDER setting

    Returns:
        A shared DataProvider instance
    """
    kind = (kind or project_config.DATA_PROVIDER).lower()
    if kind not in ("live", "synthetic"):
        logger.warning(f"Unknown DATA_PROVIDER '{kind}', using synthetic data")
        kind = "synthetic"

    if kind not in _PROVIDERS:
        logger.info(f"Initializing {kind} data provider")
        _PROVIDERS[kind] = LiveDataProvider() if kind == "live" else SyntheticDataProvider()
    return _PROVIDERS[kind]


__all__ = [
    'DataProvider',
    'RESPONSE_KEYS',
    'NESTED_KEYS',
    'missing_fields',
    'DataProviderError',
    'TokenError',
    'UpstreamError',
    'SyntheticDataProvider',
    'LiveDataProvider',
    'TokenManager',
    'get_data_provider',
]
