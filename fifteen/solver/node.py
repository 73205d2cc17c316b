"""
Search Node Module - Parent-indexed search tree storage.

Nodes live in a growable arena and refer to their parent by index.
Indices are handed out in increasing order and never reused within one
search, so every parent index is smaller than its child's and walking
parents always terminates at the root.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .board import Board
from .move import Move

ROOT_PARENT = -1


@dataclass(frozen=True)
class SearchNode:
    """
    Node in an A*-family search tree.

    Attributes:
        board: Board state at this node
        g: Moves from the root
        h: Heuristic estimate to the goal
        f: Priority (g + weight * h)
        parent: Arena index of the parent, ROOT_PARENT for the root
        move: Move that produced this node from its parent
    """
    board: Board
    g: int
    h: int
    f: float
    parent: int = ROOT_PARENT
    move: Optional[Move] = None


class NodeArena:
    """Append-only node storage with index-based path reconstruction."""

    def __init__(self):
        self._nodes: List[SearchNode] = []

    def add(self, node: SearchNode) -> int:
        """
        Store a node and return its index.

        Args:
            node: Node whose parent index (if any) is already stored

        Returns:
            Index of the stored node
        """
        self._nodes.append(node)
        return len(self._nodes) - 1

    def __getitem__(self, index: int) -> SearchNode:
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def path_to(self, index: int) -> Tuple[Move, ...]:
        """
        Moves from the root to the node at index.

        Args:
            index: Arena index of the final node

        Returns:
            Ordered tuple of moves (empty for the root)
        """
        moves: List[Move] = []
        node = self._nodes[index]
        while node.parent != ROOT_PARENT:
            moves.append(node.move)
            node = self._nodes[node.parent]
        moves.reverse()
        return tuple(moves)
