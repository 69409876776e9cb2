"""
POS Admin - Auth
================
Logowanie / wylogowanie. Token trafia do SessionContext klienta API.
"""

import logging
from typing import Any, Dict, Optional

from config.settings import ENDPOINTS
from core.api_client import ApiClient, get_api_client
from core.exceptions import ApiError, AuthError

logger = logging.getLogger(__name__)

TOKEN_KEYS = ("token", "accessToken", "access_token")


class AuthService:
    """
    Usage:
        auth = AuthService()
        auth.login("admin", "secret")
        ...
        auth.logout()
    """

    def __init__(self, client: ApiClient = None):
        self.client = client or get_api_client()

    @property
    def is_authenticated(self) -> bool:
        return self.client.session.is_authenticated

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Zaloguj i zapisz token w sesji.

        Returns:
            Dane użytkownika zwrócone przez API

        Raises:
            ApiError: Błąd API (np. 401 przy złym haśle)
            AuthError: Odpowiedź bez tokenu
        """
        payload = self.client.post(
            ENDPOINTS["AUTH_LOGIN"],
            {"username": username, "password": password},
        ) or {}

        token = self._extract_token(payload)
        if not token:
            raise AuthError("Login response does not contain a token", code="NO_TOKEN")

        user_info = payload.get("user") or {
            key: value for key, value in payload.items() if key not in TOKEN_KEYS
        }
        self.client.session.set_token(token, user_info)
        logger.info(f"[Auth] Logged in as {username}")
        return user_info

    def logout(self) -> None:
        """
        Wyloguj. Błąd serwera nie blokuje wyczyszczenia lokalnej sesji.
        """
        if self.is_authenticated:
            try:
                self.client.post(ENDPOINTS["AUTH_LOGOUT"])
            except ApiError as e:
                logger.warning(f"[Auth] Logout request failed: {e}")

        self.client.session.clear()
        logger.info("[Auth] Logged out")

    @staticmethod
    def _extract_token(payload: Dict[str, Any]) -> Optional[str]:
        for key in TOKEN_KEYS:
            if payload.get(key):
                return payload[key]
        return None
