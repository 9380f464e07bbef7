# src/app/services/key_rotator.py
"""
Upstream API key rotation.
Picks the first usable key in priority order and retires keys whose quota is spent.
"""
from __future__ import annotations

import logging
from typing import Iterable

from src.app.domain.errors import NoCredentialsAvailableError
from src.app.domain.models import Credential, CredentialState

logger = logging.getLogger(__name__)


class KeyRotator:
    """
    Holds the ordered credentials for the recipe API.

    Exhaustion is in-memory and lasts for the process lifetime. The flag only
    ever moves towards EXHAUSTED, so concurrent callers marking the same key
    need no locking.
    """

    def __init__(self, keys: Iterable[str]):
        self._credentials = [
            Credential(label=f"key-{index}", key=key)
            for index, key in enumerate((k for k in keys if k), start=1)
        ]
        if not self._credentials:
            logger.warning("KeyRotator initialized without any recipe API keys")

    @property
    def credentials(self) -> tuple[Credential, ...]:
        return tuple(self._credentials)

    def select_credential(self) -> Credential:
        """
        Return the highest-priority credential that is not exhausted.

        Raises:
            NoCredentialsAvailableError: If every credential is exhausted
        """
        for credential in self._credentials:
            if not credential.is_exhausted:
                return credential
        raise NoCredentialsAvailableError(total_credentials=len(self._credentials))

    def mark_exhausted(self, credential: Credential) -> None:
        if credential.is_exhausted:
            return
        credential.state = CredentialState.EXHAUSTED
        logger.warning(
            "Recipe API key exhausted: %s (%d of %d still available)",
            credential.label,
            self.available_count(),
            len(self._credentials),
        )

    def mark_ok(self, credential: Credential) -> None:
        if credential.state is CredentialState.UNKNOWN:
            credential.state = CredentialState.OK

    def available_count(self) -> int:
        return sum(1 for credential in self._credentials if not credential.is_exhausted)

    def status(self) -> list[dict[str, str]]:
        return [
            {"label": credential.label, "state": credential.state.value}
            for credential in self._credentials
        ]
