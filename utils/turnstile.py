import logging
from typing import Protocol

import httpx

from config import TURNSTILE_SITEVERIFY_URL

logger = logging.getLogger(__name__)


class HumanVerifier(Protocol):
    def check(self, token: str, remote_ip: str) -> bool: ...


class TurnstileVerifier:
    """
    Forwards a Turnstile token to Cloudflare's siteverify endpoint.

    Only an explicit ``"success": true`` counts as verified. Transport errors
    and non-JSON replies propagate to the caller; they are not retried.
    """

    def __init__(
        self,
        secret: str,
        verify_url: str = TURNSTILE_SITEVERIFY_URL,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ):
        self.secret = secret
        self.verify_url = verify_url
        self.timeout = timeout
        self._client = client

    def check(self, token: str, remote_ip: str) -> bool:
        data = {"secret": self.secret, "response": token, "remoteip": remote_ip}
        try:
            if self._client is not None:
                response = self._client.post(self.verify_url, data=data, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.verify_url, data=data)
        except httpx.HTTPError as e:
            logger.error(f"Turnstile siteverify unreachable: {e}")
            raise

        payload = response.json()
        if not isinstance(payload, dict):
            return False
        if payload.get("success") is not True:
            logger.info(f"Turnstile rejected token: {payload.get('error-codes', [])}")
            return False
        return True
