"""LedgerAdapter — протокол внешнего ledger и in-memory реализация.

Контракт:
- balance_of(account) -> amount (чтение)
- move(source, destination, amount): атомарный debit+credit,
  отказ если баланса источника недостаточно
- total_supply() -> amount

NULL_ACCOUNT как источник означает mint (total supply растёт),
как получатель — burn (total supply уменьшается).
"""

import logging
from collections import defaultdict
from typing import Dict, Protocol, Tuple, runtime_checkable

from src.core.domain.units import NULL_ACCOUNT
from src.core.math.integer_math import validate_amount

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerError(Exception):
    """Базовая ошибка ledger."""
    pass


class InsufficientBalance(LedgerError):
    """Баланс источника меньше запрошенной суммы."""

    def __init__(self, account: str, balance: int, amount: int):
        super().__init__(
            f"Insufficient balance: account={account} balance={balance} amount={amount}"
        )
        self.account = account
        self.balance = balance
        self.amount = amount


class InsufficientAllowance(LedgerError):
    """Allowance spender'а меньше запрошенной суммы."""

    def __init__(self, owner: str, spender: str, allowance: int, amount: int):
        super().__init__(
            f"Insufficient allowance: owner={owner} spender={spender} "
            f"allowance={allowance} amount={amount}"
        )
        self.owner = owner
        self.spender = spender
        self.allowance = allowance
        self.amount = amount


# =============================================================================
# PROTOCOL
# =============================================================================


@runtime_checkable
class LedgerAdapter(Protocol):
    """Read/write доступ движка к балансам."""

    def balance_of(self, account: str) -> int:
        ...

    def move(self, source: str, destination: str, amount: int) -> None:
        ...

    def total_supply(self) -> int:
        ...


# =============================================================================
# IN-MEMORY LEDGER
# =============================================================================


class InMemoryLedger:
    """In-memory fungible ledger.

    Балансы и allowances хранятся в словарях; отсутствующий ключ = 0.
    Все операции атомарны: проверка выполняется до любой мутации.
    """

    def __init__(self, initial_balances: Dict[str, int] | None = None):
        """
        Args:
            initial_balances: начальные балансы (засчитываются в total supply)
        """
        self._balances: Dict[str, int] = defaultdict(int)
        self._allowances: Dict[Tuple[str, str], int] = defaultdict(int)
        self._total_supply = 0

        for account, amount in (initial_balances or {}).items():
            self.move(NULL_ACCOUNT, account, amount)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def move(self, source: str, destination: str, amount: int) -> None:
        """Атомарное перемещение amount от source к destination.

        Raises:
            InsufficientBalance: если source != NULL_ACCOUNT и баланса не хватает
        """
        validate_amount(amount)

        if source != NULL_ACCOUNT:
            balance = self.balance_of(source)
            if balance < amount:
                raise InsufficientBalance(source, balance, amount)

        if source == NULL_ACCOUNT:
            self._total_supply += amount
        else:
            self._balances[source] -= amount

        if destination == NULL_ACCOUNT:
            self._total_supply -= amount
        else:
            self._balances[destination] += amount

        logger.debug("ledger move %s -> %s: %d", source, destination, amount)

    # -------------------------------------------------------------------------
    # Allowances
    # -------------------------------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Установка allowance (перезапись, не накопление)."""
        validate_amount(amount)
        self._allowances[(owner, spender)] = amount

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """Списание allowance.

        Raises:
            InsufficientAllowance: если allowance < amount
        """
        validate_amount(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance(owner, spender, current, amount)
        self._allowances[(owner, spender)] = current - amount
