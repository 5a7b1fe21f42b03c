"""
Google id token verification via the tokeninfo endpoint.
"""

from __future__ import annotations

import logging

import httpx

from src.components.auth.models import GoogleIdentity

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


class GoogleTokenInfoVerifier:
    """
    Verifies Google id tokens against the configured OAuth client id.

    Google checks the signature and expiry; this adapter checks the audience
    and the issuer of the returned claims.
    """

    def __init__(
        self,
        client_id: str | None,
        tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo",
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._url = tokeninfo_url
        self._http = http_client
        self._timeout = timeout

    def verify(self, token: str) -> GoogleIdentity | None:
        if not self._client_id:
            logger.error("Google sign-in attempted but no client id is configured")
            return None

        try:
            if self._http is not None:
                response = self._http.get(self._url, params={"id_token": token})
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.get(self._url, params={"id_token": token})
        except httpx.HTTPError as e:
            logger.warning("Google token verification failed: %s", e)
            return None

        if response.status_code != 200:
            return None

        claims = response.json()
        if claims.get("aud") != self._client_id:
            logger.warning("Google token issued for another client: %s", claims.get("aud"))
            return None
        if claims.get("iss") not in GOOGLE_ISSUERS:
            return None
        if not claims.get("sub") or not claims.get("email"):
            return None

        return GoogleIdentity(
            google_id=str(claims["sub"]),
            email=str(claims["email"]),
            name=str(claims.get("name") or ""),
            avatar_url=claims.get("picture"),
            email_verified=str(claims.get("email_verified", "")).lower() == "true",
        )
