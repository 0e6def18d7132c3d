"""Ordered fallback strategies.

A stage that can answer in several ways (model A, then model B, then a
heuristic) lists them as strategies and runs :func:`first_success`, which
stops at the first strategy that produces a value.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Protocol, Sequence, TypeVar

from truthscore.errors import ConfigurationError, StrategiesExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    strategy: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Strategy(Protocol[T]):
    name: str

    async def attempt(self, *args: Any, **kwargs: Any) -> Outcome[T]:
        ...


class CallableStrategy(Generic[T]):
    """Adapts an async callable to the strategy interface.

    Exceptions raised by the callable become failed outcomes.
    """

    def __init__(self, name: str, func: Callable[..., Awaitable[T]]) -> None:
        self.name = name
        self._func = func

    async def attempt(self, *args: Any, **kwargs: Any) -> Outcome[T]:
        try:
            value = await self._func(*args, **kwargs)
        except Exception as exc:
            return Outcome(strategy=self.name, error=exc)
        return Outcome(strategy=self.name, value=value)


def not_configuration_error(exc: Exception) -> bool:
    return not isinstance(exc, ConfigurationError)


async def first_success(
    strategies: Sequence[Strategy[T]],
    *args: Any,
    fall_through: Callable[[Exception], bool] = not_configuration_error,
    **kwargs: Any,
) -> Outcome[T]:
    """Run *strategies* in order and return the first successful outcome.

    A failure moves on to the next strategy only when ``fall_through(error)``
    is true; otherwise the error is raised at once. When every strategy
    fails, :class:`StrategiesExhaustedError` is raised.
    """
    errors: list[Exception] = []
    for strategy in strategies:
        outcome = await strategy.attempt(*args, **kwargs)
        if outcome.ok:
            logger.debug("Strategy '%s' succeeded", strategy.name)
            return outcome
        if not fall_through(outcome.error):
            raise outcome.error
        logger.warning("Strategy '%s' failed: %s", strategy.name, outcome.error)
        errors.append(outcome.error)
    raise StrategiesExhaustedError(errors)
