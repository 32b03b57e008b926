"""
Serial dispatcher - Single-writer stand-in for the ordering substrate.

Mutating calls are executed one at a time. Inside the critical section
the dispatcher draws the next timestamp from the clock and builds the
CallContext, so timestamps follow the same total order as the audit log.
"""

import logging
import threading
from collections.abc import Callable
from typing import Concatenate, ParamSpec, TypeVar

from identity_registry.domain.exceptions import RegistryError
from identity_registry.domain.ports import CallContext, Clock, Principal

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class SerialDispatcher:
    """Applies registry operations in a strict total order."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._lock = threading.Lock()

    def submit(
        self,
        caller: Principal,
        operation: Callable[Concatenate[CallContext, P], T],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> T:
        """
        Run operation(ctx, *args, **kwargs) as caller.

        Args:
            caller: Principal supplied by the transport
            operation: Bound Registry method taking a CallContext first

        Returns:
            Whatever the operation returns

        Raises:
            RegistryError: Propagated unchanged from the operation
        """
        with self._lock:
            ctx = CallContext(caller=caller, now=self._clock.now())
            try:
                return operation(ctx, *args, **kwargs)
            except RegistryError as e:
                logger.warning(
                    "Rejected %s by %s: %s %s",
                    getattr(operation, "__name__", "operation"),
                    caller,
                    type(e).__name__,
                    e,
                )
                raise
