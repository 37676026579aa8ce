"""ContextRegistry — реестры market venues и exemptions с контролем доступа.

Реестры являются явным конфигурационным состоянием одного компонента.
Мутации возможны только через controller; движок читает реестры,
но никогда их не меняет.

Порядок проверок мутации:
1. caller == controller → иначе UnauthorizedController
2. Применение изменения
3. Логирование изменения
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet

logger = logging.getLogger(__name__)


class RegistryKind(str, Enum):
    """Тип реестра."""

    MARKET_VENUE = "MARKET_VENUE"
    EXEMPT = "EXEMPT"


class UnauthorizedController(PermissionError):
    """Мутация реестра не от controller."""

    def __init__(self, caller: str, controller: str):
        super().__init__(f"Caller {caller} is not the registry controller {controller}")
        self.caller = caller
        self.controller = controller


class ContextRegistry:
    """Реестры market venues и exempt аккаунтов.

    Оба реестра — boolean maps по аккаунту; отсутствие ключа = False.
    """

    def __init__(self, controller: str):
        """
        Args:
            controller: единственный аккаунт, которому разрешены мутации
        """
        if not controller:
            raise ValueError("controller must be a non-empty account")
        self._controller = controller
        self._members: Dict[RegistryKind, Dict[str, bool]] = {
            RegistryKind.MARKET_VENUE: {},
            RegistryKind.EXEMPT: {},
        }

    @property
    def controller(self) -> str:
        return self._controller

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    def is_member(self, kind: RegistryKind, account: str) -> bool:
        return self._members[kind].get(account, False)

    def is_market_venue(self, account: str) -> bool:
        return self.is_member(RegistryKind.MARKET_VENUE, account)

    def is_exempt(self, account: str) -> bool:
        return self.is_member(RegistryKind.EXEMPT, account)

    def members(self, kind: RegistryKind) -> FrozenSet[str]:
        """Текущие члены реестра (только со значением True)."""
        return frozenset(a for a, flag in self._members[kind].items() if flag)

    # -------------------------------------------------------------------------
    # Мутации (только controller)
    # -------------------------------------------------------------------------

    def set_market_venue(self, caller: str, account: str, flag: bool = True) -> None:
        self._set(caller, RegistryKind.MARKET_VENUE, account, flag)

    def set_exempt(self, caller: str, account: str, flag: bool = True) -> None:
        self._set(caller, RegistryKind.EXEMPT, account, flag)

    def transfer_control(self, caller: str, new_controller: str) -> None:
        """Передача роли controller другому аккаунту."""
        self._authorize(caller)
        if not new_controller:
            raise ValueError("new_controller must be a non-empty account")
        logger.info("registry control transferred: %s -> %s", self._controller, new_controller)
        self._controller = new_controller

    def _set(self, caller: str, kind: RegistryKind, account: str, flag: bool) -> None:
        self._authorize(caller)
        if not account:
            raise ValueError("account must be non-empty")
        self._members[kind][account] = bool(flag)
        logger.info("registry %s: %s=%s (by %s)", kind.value, account, flag, caller)

    def _authorize(self, caller: str) -> None:
        if caller != self._controller:
            logger.warning("unauthorized registry mutation attempt by %s", caller)
            raise UnauthorizedController(caller, self._controller)
