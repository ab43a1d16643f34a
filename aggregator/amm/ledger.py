"""In-memory account balance ledger.

The ledger is owned by the AMM side of the system: venues debit and credit
traders through it when a swap executes. The routing core never touches it
directly; it only relies on ``snapshot``/``restore`` through the registry's
atomic scope.
"""

from __future__ import annotations

import structlog

from aggregator.errors import InsufficientBalance
from aggregator.models.types import normalize_token
from aggregator.safe_int import S

logger = structlog.get_logger()

LedgerSnapshot = dict[tuple[str, str], int]


class Ledger:
    """Balances keyed by (account, token), with tokens normalized."""

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}

    def balance(self, account: str, token: str) -> int:
        return self._balances.get((account, normalize_token(token)), 0)

    def deposit(self, account: str, token: str, amount: int) -> None:
        """Credit ``amount`` of ``token`` to ``account``.

        Raises:
            BalanceOverflow: If the new balance exceeds the balance width
        """
        key = (account, normalize_token(token))
        self._balances[key] = (S(self._balances.get(key, 0)) + S(amount)).value

    def withdraw(self, account: str, token: str, amount: int) -> None:
        """Debit ``amount`` of ``token`` from ``account``.

        Raises:
            InsufficientBalance: If the account holds less than ``amount``
        """
        key = (account, normalize_token(token))
        remaining = S(self._balances.get(key, 0)).checked_sub(S(amount))
        if remaining is None:
            raise InsufficientBalance(
                f"{account} holds {self.balance(account, token)} {token}, needs {amount}"
            )
        self._balances[key] = remaining.value

    def snapshot(self) -> LedgerSnapshot:
        return dict(self._balances)

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._balances = dict(snapshot)
        logger.debug("ledger_restored", entries=len(snapshot))


__all__ = ["Ledger", "LedgerSnapshot"]
