"""
Account record and an in-memory AccountStore.

Production callers plug in their own store (ORM repository etc.); this one
backs tests and single-process tools.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from integrations.messaging.numbers import normalize_digits, strip_internationalize


@dataclass
class AccountRecord:
    display_name: str
    messaging_number: str | None = None
    id: UUID = field(default_factory=uuid4)


class InMemoryAccountStore:
    """AccountStore keeping accounts in a list."""

    def __init__(self, accounts: list[AccountRecord] | None = None) -> None:
        self._accounts: list[AccountRecord] = list(accounts or [])
        self._lock = threading.Lock()

    def add(self, account: AccountRecord) -> AccountRecord:
        with self._lock:
            self._accounts.append(account)
        return account

    @property
    def accounts(self) -> list[AccountRecord]:
        return self._accounts.copy()

    def find_by_messaging_number(self, number: str) -> AccountRecord | None:
        wanted = _local_digits(number)
        if not wanted:
            return None
        with self._lock:
            for account in self._accounts:
                if account.messaging_number and _local_digits(account.messaging_number) == wanted:
                    return account
        return None

    def assign_messaging_number(self, account: AccountRecord, number: str) -> None:
        # Stored without the country prefix, the form inbound lookups use.
        with self._lock:
            account.messaging_number = strip_internationalize(number)
            if account not in self._accounts:
                self._accounts.append(account)


def _local_digits(number: str) -> str:
    return normalize_digits(strip_internationalize(number))
