#!/usr/bin/env python3
"""
OAuth client-credentials token cache for the authenticated Fannie Mae APIs.
"""

import logging
import threading
import time
from typing import Optional

import requests

import project_config
from data_provider.exceptions import TokenError

logger = logging.getLogger("data-provider")


class TokenManager:
    """
    Fetches and caches a bearer token, refreshing it shortly before expiry.

    Safe to share across request threads: the cache is guarded by a lock.
    """

    def __init__(self, session: requests.Session, token_url: str = None, client_id: str = None,
                 client_secret: str = None, expiry_margin: int = None, timeout: float = None):
        self.session = session
        self.token_url = token_url or project_config.FANNIEMAE_TOKEN_URL
        self.client_id = client_id if client_id is not None else project_config.FANNIEMAE_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else project_config.FANNIEMAE_CLIENT_SECRET
        self.expiry_margin = project_config.TOKEN_EXPIRY_MARGIN if expiry_margin is None else expiry_margin
        self.timeout = timeout or project_config.REQUEST_TIMEOUT

        self._token: Optional[str] = None
        self._expires_at: float = 0.0
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_token(self) -> str:
        """
        Return a valid access token, requesting a new one when needed

        Returns:
            The bearer token string

        Raises:
            TokenError: credentials are missing or the token endpoint failed
        """
        with self._lock:
            if self._token and time.time() < self._expires_at - self.expiry_margin:
                return self._token

            self._token, self._expires_at = self._request_token()
            return self._token

    def invalidate(self):
        """Drop the cached token so the next call fetches a fresh one"""
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _request_token(self):
        if not self.configured:
            raise TokenError("Client credentials are not configured")

        logger.info("🔑 Requesting OAuth access token")
        try:
            response = self.session.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TokenError(f"Token request failed: {e}") from e

        if not response.ok:
            raise TokenError(f"Failed to get access token: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TokenError("Token endpoint returned a non-JSON response") from e

        token = payload.get("access_token")
        if not token:
            raise TokenError("Token response did not include an access_token")

        expires_in = float(payload.get("expires_in", 3600))
        return token, time.time() + expires_in
