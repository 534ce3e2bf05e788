"""
In-memory publish/subscribe primitive used to keep UI subscribers in sync.

A Subject holds an ordered list of observers and broadcasts a payload to each
of them. The cart and the shopping lists each get their own Subject instance;
they are configured by name and payload type, not subclassed.

Design decisions:
- Synchronous delivery on the caller's turn, in attachment order
- Attach is idempotent and detach is by identity
- A failing observer is logged and skipped; the others still get the payload
- No replay: an observer only sees payloads published while attached
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, Protocol, TypeVar

logger = logging.getLogger("observer")

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class Observer(Protocol[T_contra]):
    """Anything with an `update(payload)` method can subscribe."""

    def update(self, payload: T_contra) -> None: ...


class CallbackObserver(Generic[T]):
    """
    Adapts a plain callable to the Observer interface.

    Example:
        seen = []
        observer = CallbackObserver(seen.append)
        cart_subject.attach(observer)
    """

    def __init__(self, callback: Callable[[T], None], name: str = ""):
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "callback")

    def update(self, payload: T) -> None:
        self.callback(payload)

    def __repr__(self) -> str:
        return f"CallbackObserver({self.name})"


class Subject(Generic[T]):
    """
    Broadcasts payloads of type T to attached observers.

    Example usage:
        cart_subject: Subject[list[CartItem]] = Subject("cart")

        observer = CallbackObserver(render_cart_badge)
        with cart_subject.subscribed(observer):
            await cart_controller.add_to_cart(user_id, product_id)
        # observer is detached again here
    """

    def __init__(self, name: str):
        self.name = name
        self._observers: list[Observer[T]] = []

    def attach(self, observer: Observer[T]) -> None:
        """
        Add an observer to the end of the list.

        Attaching an observer that is already attached does nothing.
        """
        if self._contains(observer):
            logger.warning(f"[{self.name}] Observer already attached: {observer!r}")
            return
        self._observers.append(observer)
        logger.debug(f"[{self.name}] Attached {observer!r} ({len(self._observers)} observers)")

    def detach(self, observer: Observer[T]) -> bool:
        """
        Remove an observer.

        Returns:
            True if it was attached, False if it was not (nothing changes)
        """
        for index, existing in enumerate(self._observers):
            if existing is observer:
                del self._observers[index]
                logger.debug(f"[{self.name}] Detached {observer!r}")
                return True
        return False

    def notify(self, payload: T) -> int:
        """
        Deliver a payload to every attached observer, in attachment order.

        Returns:
            Number of observers that handled the payload without raising

        Each observer is guarded on its own: if one raises, the error is
        logged and delivery continues with the next observer.
        """
        delivered = 0
        # Snapshot so observers may detach themselves while being notified
        for observer in list(self._observers):
            try:
                observer.update(payload)
            except Exception:
                logger.exception(f"[{self.name}] Observer {observer!r} failed")
                continue
            delivered += 1
        return delivered

    @contextmanager
    def subscribed(self, observer: Observer[T]) -> Iterator[Observer[T]]:
        """Attach `observer` for the duration of a block; always detach after."""
        self.attach(observer)
        try:
            yield observer
        finally:
            self.detach(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def clear(self) -> None:
        """Remove all observers."""
        self._observers.clear()

    def _contains(self, observer: Observer[T]) -> bool:
        return any(existing is observer for existing in self._observers)
