"""
Evidence clamping: observed values that override message computation.
"""

from __future__ import annotations

import numbers
from typing import Dict, Iterable, Iterator, Mapping, Tuple, Union

import torch

from .errors import OutOfRange, UnknownNode
from .node_table import NodeId

EvidencePairs = Union[Mapping[NodeId, int], Iterable[Tuple[NodeId, int]]]


class Evidence:
    """
    Observed node values for one engine.

    Args:
        cards: Cardinality of every node, indexed by node id
        dtype: Floating point type of the delta messages
    """

    def __init__(self, cards, dtype=torch.float64):
        self.cards = list(cards)
        self.dtype = dtype
        self._observed: Dict[NodeId, int] = {}

    def set(self, pairs: EvidencePairs) -> None:
        """
        Replace the current evidence with ``pairs``.

        Nothing is changed if any pair is invalid.

        Raises:
            UnknownNode: A node id outside the network
            OutOfRange: A value that is not an index into the node's values
        """
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        observed: Dict[NodeId, int] = {}
        for node, value in pairs:
            if not isinstance(node, numbers.Integral) or isinstance(node, bool) \
                    or not 0 <= node < len(self.cards):
                raise UnknownNode(node)
            card = self.cards[node]
            if not isinstance(value, numbers.Integral) or isinstance(value, bool) \
                    or not 0 <= value < card:
                raise OutOfRange(
                    f"Evidence value {value!r} for node {node} is outside [0, {card})."
                )
            observed[int(node)] = int(value)
        self._observed = observed

    def clear(self) -> None:
        self._observed = {}

    def value(self, node: NodeId) -> int:
        return self._observed[node]

    def delta(self, node: NodeId) -> torch.Tensor:
        """One-hot log vector at the observed value: 0 there, -inf elsewhere."""
        msg = torch.full((self.cards[node],), float("-inf"), dtype=self.dtype)
        msg[self._observed[node]] = 0.0
        return msg

    def items(self):
        return self._observed.items()

    def as_dict(self) -> Dict[NodeId, int]:
        return dict(self._observed)

    def __contains__(self, node) -> bool:
        return node in self._observed

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._observed)

    def __len__(self):
        return len(self._observed)

    def __repr__(self):
        return f"Evidence({self._observed})"
