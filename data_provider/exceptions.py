"""
Data Provider exceptions

These never escape a provider: the live provider raises them internally and
catches them at its synthetic fallback boundary.
"""


class DataProviderError(Exception):
    """Base class for data provider failures"""


class TokenError(DataProviderError):
    """The OAuth client-credentials exchange failed"""


class UpstreamError(DataProviderError):
    """The upstream API was unreachable, returned an error status or an unexpected payload"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
