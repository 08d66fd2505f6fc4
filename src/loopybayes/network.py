"""
Bayesian network facade: build a network node by node, then run loopy BP.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

import torch

from .belief_propagation import BPState, LoopyBeliefPropagation
from .evidence import EvidencePairs
from .node_table import NodeId, NodeTable
from .prob_vector import LogProbVector

logger = logging.getLogger(__name__)


class BayesNet:
    """
    Representation of a Bayesian network.

    Once built by adding nodes one by one, the network runs inference given
    some evidence::

        net = BayesNet()
        rain = net.insert_node_from_probabilities([], [0.8, 0.2])
        wet = net.insert_node_from_probabilities([rain], [[0.9, 0.2], [0.1, 0.8]])
        net.set_evidence([(wet, 1)])
        net.reset_state()
        for _ in range(10):
            net.step()
        net.beliefs()[rain].as_probabilities()

    Args:
        atol: Tolerance on the sum of each CPT slice
        normalize: Renormalize messages after each update
        damping: Damping of factor-to-variable messages, in ``[0, 1)``
        dtype: Floating point type of CPTs and messages
    """

    def __init__(self, atol: float = 1e-6, normalize: bool = True, damping: float = 0.0,
                 dtype=torch.float64):
        if not 0.0 <= damping < 1.0:
            raise ValueError(f"damping must be in [0, 1), got {damping}")
        self.table = NodeTable(atol=atol, dtype=dtype)
        self.normalize = normalize
        self.damping = damping
        self._engine: Optional[LoopyBeliefPropagation] = None

    @property
    def engine(self) -> LoopyBeliefPropagation:
        """The inference engine for the nodes inserted so far."""
        if self._engine is None:
            self._engine = LoopyBeliefPropagation(
                self.table, normalize=self.normalize, damping=self.damping
            )
        return self._engine

    def insert_node_from_probabilities(self, parents: Sequence[NodeId], cpt) -> NodeId:
        """
        Add a node from probabilities ``p(x | parents)``.

        See :meth:`NodeTable.insert_node_from_probabilities`.
        """
        node = self.table.insert_node_from_probabilities(parents, cpt)
        self._topology_changed()
        return node

    def insert_node_from_log_probabilities(
        self, parents: Sequence[NodeId], log_cpt, normalize: bool = False
    ) -> NodeId:
        """
        Add a node from natural-log probabilities.

        See :meth:`NodeTable.insert_node_from_log_probabilities`.
        """
        node = self.table.insert_node_from_log_probabilities(parents, log_cpt, normalize=normalize)
        self._topology_changed()
        return node

    def node_cardinality(self, node: NodeId) -> int:
        return self.table.node_cardinality(node)

    def parents_of(self, node: NodeId) -> Tuple[NodeId, ...]:
        return self.table.parents_of(node)

    def set_evidence(self, pairs: EvidencePairs) -> None:
        """
        Set the evidence as a list of ``(node, value)`` pairs, replacing any
        previous evidence. Call :meth:`reset_state` before stepping again.
        """
        self.engine.set_evidence(pairs)

    def reset_state(self) -> None:
        """Reset the internal messages to begin a new inference."""
        self.engine.reset_state()

    def step(self) -> None:
        """
        Compute one step of the loopy belief propagation algorithm.

        The algorithm can be run for any number of steps; it is up to the
        caller to decide when to stop, for instance when the beliefs stop
        changing significantly.
        """
        self.engine.step()

    def beliefs(self) -> Dict[NodeId, LogProbVector]:
        """Current belief of each node according to the current messages."""
        return self.engine.beliefs()

    def snapshot(self) -> BPState:
        return self.engine.snapshot()

    def __len__(self):
        return len(self.table)

    def __repr__(self):
        return f"BayesNet(nnodes={len(self.table)})"

    def _topology_changed(self) -> None:
        if self._engine is None:
            return
        evidence = self._engine.evidence.as_dict()
        logger.debug("Topology changed; discarding inference state")
        self._engine = None
        if evidence:
            self.engine.set_evidence(evidence)
