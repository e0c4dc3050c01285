"""
Ephemeral registration state - Typed access to the key-value store.

Wraps the EphemeralStore port with typed read/write for the payloads that
bridge registration steps before a durable account record exists.
Payloads have no expiry: a stale payload persists until it is overwritten
by a new registration or consumed by verification.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from .models import BankBasicInfo, BankFullDetails
from .ports import EphemeralStore

logger = logging.getLogger(__name__)

BASIC_INFO_KEY = "bank_basic_info"
PENDING_PASSWORD_KEY = "bank_pending_password"
FULL_DETAILS_KEY = "bank_full_details"

FLOW_KEYS = (BASIC_INFO_KEY, PENDING_PASSWORD_KEY, FULL_DETAILS_KEY)


@dataclass
class RegistrationStateStore:
    """Typed adapter over the ephemeral store for one registration flow."""

    store: EphemeralStore

    def put_basic_info(self, info: BankBasicInfo) -> None:
        self._put_json(BASIC_INFO_KEY, info.to_dict())

    def get_basic_info(self) -> BankBasicInfo | None:
        data = self._get_json(BASIC_INFO_KEY)
        if data is None:
            return None
        try:
            return BankBasicInfo.from_dict(data)
        except (KeyError, TypeError):
            logger.warning("Discarding incomplete payload under %s", BASIC_INFO_KEY)
            return None

    def put_pending_password(self, password: str) -> None:
        self._put_json(PENDING_PASSWORD_KEY, password)

    def get_pending_password(self) -> str | None:
        data = self._get_json(PENDING_PASSWORD_KEY)
        if not isinstance(data, str):
            return None
        return data

    def put_full_details(self, details: BankFullDetails) -> None:
        self._put_json(FULL_DETAILS_KEY, details.to_dict())

    def get_full_details(self) -> BankFullDetails | None:
        data = self._get_json(FULL_DETAILS_KEY)
        if data is None:
            return None
        try:
            return BankFullDetails.from_dict(data)
        except (AttributeError, TypeError):
            logger.warning("Discarding incomplete payload under %s", FULL_DETAILS_KEY)
            return None

    def remove(self, key: str) -> None:
        self.store.remove(key)

    def clear(self) -> None:
        """Remove every key used by the registration flow."""
        for key in FLOW_KEYS:
            self.store.remove(key)

    def _put_json(self, key: str, value: Any) -> None:
        self.store.put(key, json.dumps(value))

    def _get_json(self, key: str) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed payload under %s", key)
            return None
