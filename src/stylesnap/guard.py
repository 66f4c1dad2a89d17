from collections.abc import Iterable, Iterator
from contextlib import contextmanager


class RecursionGuard:
    """
    Set of nodes already produced by a serializer, keyed by identity.

    While the host printer formats a serializer's output, the nodes in
    that output are registered here so that the serializer neither
    transforms them again nor emits their styles a second time.
    """

    def __init__(self) -> None:
        # Values keep registered nodes alive, so their ids cannot be reused
        self._nodes = {}  # type: dict[int, object]

    def __contains__(self, node: object) -> bool:
        return id(node) in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: object) -> None:
        self._nodes[id(node)] = node

    def discard(self, node: object) -> None:
        self._nodes.pop(id(node), None)

    @contextmanager
    def registered(self, nodes: Iterable[object]) -> Iterator[None]:
        """
        Context in which the specified nodes are registered.

        Only nodes that were not already registered on entry are
        unregistered on exit, whether or not an exception was raised.
        """
        added = [n for n in nodes if n not in self]
        for node in added:
            self.add(node)
        try:
            yield
        finally:
            for node in added:
                self.discard(node)
