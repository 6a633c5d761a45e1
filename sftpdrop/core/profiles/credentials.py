from __future__ import annotations

import keyring
import keyring.errors


class CredentialService:
    _SERVICE_NAME = "sftpdrop"

    def _credential_key(self, user: str, addr: str) -> str:
        return f"{user}@{addr}"

    def set_password(self, user: str, addr: str, password: str) -> None:
        keyring.set_password(self._SERVICE_NAME, self._credential_key(user, addr), password)

    def get_password(self, user: str, addr: str) -> str | None:
        return keyring.get_password(self._SERVICE_NAME, self._credential_key(user, addr))

    def delete_password(self, user: str, addr: str) -> None:
        key = self._credential_key(user, addr)
        try:
            keyring.delete_password(self._SERVICE_NAME, key)
        except keyring.errors.PasswordDeleteError:
            pass
