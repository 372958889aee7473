"""The live collection of solids shown by the viewer and read by exporters."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Tuple

from qrsolid.geometry import Solid

logger = logging.getLogger(__name__)

Listener = Callable[["Scene"], None]


class Scene:
    """Holds exactly one generation of solids at a time.

    ``replace()`` validates the new solids first and then swaps a single
    tuple reference, so a reader calling ``current()`` between frames sees
    either the complete old model or the complete new one.
    """

    def __init__(self, solids: Iterable[Solid] = ()):
        self._solids: Tuple[Solid, ...] = self._snapshot(solids)
        self._generation = 0
        self._listeners: List[Listener] = []

    @staticmethod
    def _snapshot(solids: Iterable[Solid]) -> Tuple[Solid, ...]:
        snapshot = tuple(solids)
        for idx, solid in enumerate(snapshot):
            if not isinstance(solid, Solid):
                raise TypeError(f"scene entry {idx} is not a Solid: {type(solid).__name__}")
        return snapshot

    @property
    def generation(self) -> int:
        """Number of completed ``replace()`` calls."""
        return self._generation

    def current(self) -> Tuple[Solid, ...]:
        return self._solids

    def replace(self, solids: Iterable[Solid]) -> None:
        snapshot = self._snapshot(solids)
        self._solids = snapshot
        self._generation += 1
        logger.debug("scene generation %d holds %d solids", self._generation, len(snapshot))
        for listener in list(self._listeners):
            listener(self)

    def clear(self) -> None:
        self.replace(())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(scene)`` after every replacement.

        Returns a function that removes the listener again.
        """

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._solids)

    def __iter__(self) -> Iterator[Solid]:
        return iter(self._solids)

    def __repr__(self) -> str:
        return f"Scene(generation={self._generation}, solids={len(self._solids)})"


__all__ = ["Scene"]
