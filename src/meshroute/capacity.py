"""
Capacity ledger for a routing session.

Tracks how many more paths may pass through each node. The ledger is
seeded from node capacities, consulted while searching and decremented
once per committed path. It is never replenished.
"""

from collections import Counter
from typing import Dict, Iterable, Mapping, Sequence

from .models import Node


class CapacityUnderflowError(RuntimeError):
    """Raised when a commit would drive a residual capacity below zero."""

    pass


class CapacityLedger:
    """
    Residual capacity per node id.

    A ledger belongs to one solve session. Use copy() to give each
    independent session its own ledger.
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        self.residual: Dict[str, int] = {node.id: node.capacity for node in nodes}

    def get(self, node: Node) -> int:
        """Residual capacity of ``node`` (KeyError if unknown)."""
        return self.residual[node.id]

    def has_capacity(self, node: Node) -> bool:
        """True if at least one more path may pass through ``node``."""
        return self.residual.get(node.id, 0) >= 1

    def can_commit(self, path: Sequence[Node]) -> bool:
        """Check that committing ``path`` would not underflow any node."""
        usage = Counter(node.id for node in path)
        return all(self.residual.get(nid, 0) >= count for nid, count in usage.items())

    def commit(self, path: Sequence[Node]) -> None:
        """
        Consume one unit of capacity on every node of ``path``.

        Raises:
            CapacityUnderflowError: If any node would go below zero. The
                ledger is left unchanged in that case.
        """
        usage = Counter(node.id for node in path)
        for node_id, count in usage.items():
            if node_id not in self.residual:
                raise KeyError(f"Node {node_id} is not in the ledger")
            if self.residual[node_id] < count:
                raise CapacityUnderflowError(
                    f"Node {node_id} has residual {self.residual[node_id]}, "
                    f"cannot consume {count}"
                )
        for node_id, count in usage.items():
            self.residual[node_id] -= count

    def snapshot(self) -> Mapping[str, int]:
        """Copy of the current residual map."""
        return dict(self.residual)

    def copy(self) -> "CapacityLedger":
        ledger = CapacityLedger()
        ledger.residual = dict(self.residual)
        return ledger

    def __contains__(self, node: Node) -> bool:
        return node.id in self.residual

    def __len__(self) -> int:
        return len(self.residual)
