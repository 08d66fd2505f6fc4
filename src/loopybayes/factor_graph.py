"""
Factor graph derived from a node table.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import torch

from .node_table import NodeId, NodeTable

logger = logging.getLogger(__name__)

CHILD = "child"
PARENT = "parent"


class Factor:
    """Factor class representing a node's CPT in the factor graph."""

    def __init__(self, vars: Tuple[NodeId, ...], log_values: torch.Tensor):
        """
        Args:
            vars: Scope of the factor, the node first and then its parents
            log_values: Log-potential with one axis per scope variable
        """
        self.vars = tuple(vars)
        self.log_values = log_values

    @property
    def node(self) -> NodeId:
        return self.vars[0]

    def __repr__(self):
        return f"Factor(vars={self.vars}, shape={tuple(self.log_values.shape)})"


class FactorGraph:
    """
    Bipartite variable/factor structure with the routing tables used by the
    message passing engine.

    Factor ``i`` belongs to node ``i``. ``t2v[f]`` is the scope of factor
    ``f`` and ``v2t[v]`` lists the factors incident to variable ``v``: its
    own factor first, then the factors of its children in insertion order.
    """

    def __init__(self, nvars: int, cards: List[int], factors: List[Factor]):
        self.nvars = nvars
        self.cards = cards
        self.factors = factors

        self.t2v = [list(factor.vars) for factor in self.factors]
        self.v2t = self._build_v2t()
        self.factor_pos = self._build_factor_pos()

    @classmethod
    def from_node_table(cls, table: NodeTable) -> "FactorGraph":
        """Snapshot ``table`` into a factor graph."""
        factors = [
            Factor((node,) + table.parents_of(node), table.log_cpt(node))
            for node in table
        ]
        graph = cls(len(table), table.cardinalities(), factors)
        logger.debug(
            "Built factor graph with %d variables and %d incidences",
            graph.num_variables(), graph.num_incidences(),
        )
        return graph

    def _build_v2t(self) -> List[List[int]]:
        """Build variable-to-factors mapping."""
        v2t = [[] for _ in range(self.nvars)]
        for factor_idx, vars_list in enumerate(self.t2v):
            for var in vars_list:
                v2t[var].append(factor_idx)
        return v2t

    def _build_factor_pos(self) -> List[List[int]]:
        """For each factor and scope axis, the factor's position in ``v2t`` of that variable."""
        return [
            [self.v2t[var].index(factor_idx) for var in vars_list]
            for factor_idx, vars_list in enumerate(self.t2v)
        ]

    def role(self, var: NodeId, factor_idx: int) -> str:
        """``"child"`` for the variable's own factor, ``"parent"`` otherwise."""
        return CHILD if factor_idx == var else PARENT

    def incidences(self, var: NodeId) -> List[Tuple[int, str]]:
        return [(factor_idx, self.role(var, factor_idx)) for factor_idx in self.v2t[var]]

    def num_tensors(self) -> int:
        """Return number of factors (tensors)."""
        return len(self.t2v)

    def num_variables(self) -> int:
        """Return number of variables."""
        return self.nvars

    def num_incidences(self) -> int:
        return sum(len(factors) for factors in self.v2t)

    def __repr__(self):
        return f"FactorGraph(nvars={self.nvars}, nfactors={len(self.factors)})"
