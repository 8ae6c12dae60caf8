"""Encrypted verification links."""

import json
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class LinkCipher:
    """Encrypts small JSON payloads into URL-safe tokens."""

    def __init__(self, key: str):
        self._fernet = Fernet(key.encode("utf-8"))

    def encrypt(self, payload: Dict[str, Any]) -> str:
        data = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        return self._fernet.encrypt(data.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> Dict[str, Any]:
        """Reverse encrypt().

        Raises:
            ValueError: If the token was not produced with this key
        """
        try:
            data = self._fernet.decrypt(token.encode("utf-8"))
        except InvalidToken as e:
            raise ValueError("Invalid or tampered verification token") from e
        return json.loads(data)


def build_verification_link(
    root_url: str, email: str, verification_id: str, cipher: LinkCipher
) -> str:
    """Link to the platform's verification page.

    Example:
        ``https://agneepath.co.in/Verification/verify?e=<token>&i=<token>``
    """
    email_token = cipher.encrypt({"email": email})
    id_token = cipher.encrypt({"vid": verification_id})
    return f"{root_url}Verification/verify?e={email_token}&i={id_token}"
