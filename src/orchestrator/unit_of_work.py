"""Unit of Work — атомарность операции через журнал компенсирующих действий.

Каждая мутация внутри операции регистрирует undo-действие.
При исключении undo выполняются в обратном порядке, затем исключение
пробрасывается дальше. При успехе журнал отбрасывается.

Ошибка одного undo не прерывает откат: остальные undo всё равно
выполняются, а исходное исключение оборачивается в RollbackError.

ReentrancyGuard — scoped mutual exclusion вокруг всей операции:
повторный вход из того же потока отклоняется, другие потоки ждут.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

from src.core.domain.errors import ReentrantCallError, RollbackError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Журнал компенсирующих действий одной операции.

    Usage:
        with UnitOfWork("transfer") as uow:
            ledger.move(a, b, x)
            uow.record("move a->b", lambda: ledger.move(b, a, x))
    """

    def __init__(self, name: str = "operation"):
        self.name = name
        self._undo_log: List[Tuple[str, Callable[[], None]]] = []
        self._closed = False

    def record(self, description: str, undo: Callable[[], None]) -> None:
        """Регистрация undo для уже выполненной мутации."""
        if self._closed:
            raise RuntimeError(f"UnitOfWork '{self.name}' is already closed")
        self._undo_log.append((description, undo))

    @property
    def pending(self) -> int:
        """Число зарегистрированных undo-действий."""
        return len(self._undo_log)

    def rollback(self) -> List[Tuple[str, Exception]]:
        """Выполнение всех undo в обратном порядке.

        Returns:
            Список (описание, исключение) для undo, завершившихся ошибкой
        """
        failures: List[Tuple[str, Exception]] = []
        while self._undo_log:
            description, undo = self._undo_log.pop()
            logger.debug("rollback %s: %s", self.name, description)
            try:
                undo()
            except Exception as e:
                logger.error("rollback %s: undo '%s' failed: %r", self.name, description, e)
                failures.append((description, e))
        return failures

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is not None:
                logger.debug(
                    "%s aborted (%s), rolling back %d mutation(s)",
                    self.name,
                    exc_type.__name__,
                    len(self._undo_log),
                )
                failures = self.rollback()
                if failures:
                    raise RollbackError(
                        f"{self.name}: {len(failures)} undo action(s) failed "
                        f"while handling {exc_type.__name__}",
                        original=exc,
                        failures=failures,
                    ) from exc
            else:
                self._undo_log.clear()
        finally:
            self._closed = True
        return False


class ReentrancyGuard:
    """Scoped guard: одна операция за раз.

    Повторный вход из потока-владельца — ReentrantCallError,
    остальные потоки блокируются до освобождения.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._owner: Optional[int] = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def __enter__(self) -> "ReentrancyGuard":
        ident = threading.get_ident()
        if self._owner == ident:
            raise ReentrantCallError("Operation already in progress")
        self._lock.acquire()
        self._owner = ident
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._owner = None
        self._lock.release()
        return False
