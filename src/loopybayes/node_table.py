"""
Append-only table of network nodes and their log-domain CPTs.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

import torch

from .errors import InvalidProbability, ShapeMismatch, UnknownNode
from .logmath import log_sum_exp, normalize_log, safe_log
from .utils import as_tensor

logger = logging.getLogger(__name__)

NodeId = int


@dataclass(frozen=True)
class Node:
    """A node of the network; ``log_cpt`` has shape ``(cardinality, *parent_cards)``."""

    id: NodeId
    cardinality: int
    parents: Tuple[NodeId, ...]
    log_cpt: torch.Tensor

    def __repr__(self):
        return f"Node(id={self.id}, cardinality={self.cardinality}, parents={self.parents})"


class NodeTable:
    """
    Flat store of nodes addressed by integer identifiers.

    Nodes are added once and never changed or removed, and identifiers are
    handed out in insertion order. Parent references are identifiers into
    this table, so a parent is always inserted before its children.
    """

    def __init__(self, atol: float = 1e-6, dtype=torch.float64):
        """
        Args:
            atol: Absolute tolerance on the sum of every CPT slice
            dtype: Floating point type of the stored log-CPTs
        """
        self.atol = atol
        self.dtype = dtype
        self._nodes: List[Node] = []
        self._children: List[List[NodeId]] = []

    def insert_node_from_probabilities(self, parents: Sequence[NodeId], cpt) -> NodeId:
        """
        Add a node from a table of probabilities ``p(x | parents)``.

        With parents ``(p1, ..., pk)`` the table has shape ``(N, N_p1, ..., N_pk)``
        where ``N`` is the number of values of the new node. A node without
        parents takes a 1-D prior.

        Args:
            parents: Ordered parent identifiers
            cpt: Dense array of probabilities; every slice ``cpt[:, j1, ..., jk]``
                must sum to 1

        Returns:
            Identifier of the new node

        Raises:
            UnknownNode: A parent is not in the table
            ShapeMismatch: ``cpt`` does not match the parents' cardinalities
            InvalidProbability: ``cpt`` holds negative or non-finite values, or
                a slice does not sum to 1
        """
        parents = self._check_parents(parents)
        cpt = as_tensor(cpt, dtype=self.dtype)
        self._check_shape(parents, cpt)

        if not bool(torch.isfinite(cpt).all()):
            raise InvalidProbability("CPT contains NaN or infinite values.")
        if bool((cpt < 0).any()):
            raise InvalidProbability("CPT contains negative probabilities.")
        deviation = float(torch.abs(cpt.sum(dim=0) - 1.0).max())
        if deviation > self.atol:
            raise InvalidProbability(
                f"CPT slices must sum to 1 along the leading axis "
                f"(largest deviation {deviation:.3g}, tolerance {self.atol:g})."
            )

        return self._append(parents, safe_log(cpt))

    def insert_node_from_log_probabilities(
        self, parents: Sequence[NodeId], log_cpt, normalize: bool = False
    ) -> NodeId:
        """
        Add a node from natural-log probabilities.

        ``-inf`` stands for probability 0. With ``normalize=True`` each slice
        is rescaled to a distribution, so only differences between entries of
        a slice matter (e.g. ``[0.0, -inf]`` means ``[1.0, 0.0]``). Otherwise
        each slice must already be normalized.

        Raises:
            UnknownNode, ShapeMismatch: As for :meth:`insert_node_from_probabilities`
            InvalidProbability: NaN or ``+inf`` entries, an unnormalized slice
                with ``normalize=False``, or a slice with no mass at all
        """
        parents = self._check_parents(parents)
        log_cpt = as_tensor(log_cpt, dtype=self.dtype)
        self._check_shape(parents, log_cpt)

        if bool(torch.isnan(log_cpt).any()) or bool((log_cpt == float("inf")).any()):
            raise InvalidProbability("Log-CPT contains NaN or +inf values.")

        lse = log_sum_exp(log_cpt, dim=0)
        if not bool(torch.isfinite(lse).all()):
            raise InvalidProbability("Log-CPT has a slice with zero probability mass.")
        if normalize:
            log_cpt = normalize_log(log_cpt, dim=0)
        else:
            deviation = float(torch.abs(torch.exp(lse) - 1.0).max())
            if deviation > self.atol:
                raise InvalidProbability(
                    f"Log-CPT slices must sum to 1 in probability space "
                    f"(largest deviation {deviation:.3g}, tolerance {self.atol:g})."
                )

        return self._append(parents, log_cpt)

    def node(self, node: NodeId) -> Node:
        return self._nodes[self._check_node(node)]

    def node_cardinality(self, node: NodeId) -> int:
        return self.node(node).cardinality

    def parents_of(self, node: NodeId) -> Tuple[NodeId, ...]:
        return self.node(node).parents

    def children_of(self, node: NodeId) -> Tuple[NodeId, ...]:
        """Nodes listing ``node`` as a parent, in insertion order."""
        return tuple(self._children[self._check_node(node)])

    def log_cpt(self, node: NodeId) -> torch.Tensor:
        return self.node(node).log_cpt

    def cardinalities(self) -> List[int]:
        return [n.cardinality for n in self._nodes]

    def __len__(self):
        return len(self._nodes)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(range(len(self._nodes)))

    def __contains__(self, node) -> bool:
        return self._is_node_id(node) and 0 <= node < len(self._nodes)

    def __repr__(self):
        return f"NodeTable(nnodes={len(self._nodes)})"

    @staticmethod
    def _is_node_id(node) -> bool:
        return isinstance(node, numbers.Integral) and not isinstance(node, bool)

    def _check_node(self, node) -> int:
        if node not in self:
            raise UnknownNode(node)
        return int(node)

    def _check_parents(self, parents: Sequence[NodeId]) -> Tuple[NodeId, ...]:
        parents = tuple(self._check_node(parent) for parent in parents)
        if len(set(parents)) != len(parents):
            raise ShapeMismatch(f"Duplicate parents in {parents}.")
        return parents

    def _check_shape(self, parents: Tuple[NodeId, ...], table: torch.Tensor) -> None:
        if table.ndim != len(parents) + 1:
            raise ShapeMismatch(
                f"CPT has {table.ndim} dimensions but {len(parents) + 1} are "
                f"expected for {len(parents)} parents."
            )
        if table.shape[0] == 0:
            raise ShapeMismatch("A node needs at least one value.")
        for axis, parent in enumerate(parents, start=1):
            expected = self._nodes[parent].cardinality
            if table.shape[axis] != expected:
                raise ShapeMismatch(
                    f"Dimension {axis} of the CPT does not match its parent: "
                    f"got {table.shape[axis]} but parent {parent} has {expected} values."
                )

    def _append(self, parents: Tuple[NodeId, ...], log_cpt: torch.Tensor) -> NodeId:
        node_id = len(self._nodes)
        self._nodes.append(Node(node_id, int(log_cpt.shape[0]), parents, log_cpt))
        self._children.append([])
        for parent in parents:
            self._children[parent].append(node_id)
        logger.debug("Inserted node %d with parents %s", node_id, parents)
        return node_id
