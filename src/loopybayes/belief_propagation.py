"""
Loopy Belief Propagation over a Bayesian network, in log domain.
"""

from __future__ import annotations

import logging
from functools import cached_property
from typing import Dict, List, Optional

import torch

from .evidence import Evidence, EvidencePairs
from .factor_graph import FactorGraph
from .logmath import log_marginalize, log_mix, log_sum, max_abs_difference, normalize_log
from .node_table import NodeId, NodeTable
from .prob_vector import LogProbVector
from .utils import deep_copy_messages

logger = logging.getLogger(__name__)


class BPState:
    """BP state storing log-domain messages."""

    def __init__(self, message_in: List[List[torch.Tensor]],
                 message_out: List[List[torch.Tensor]]):
        """
        Args:
            message_in: Incoming messages from factors to variables,
                ``message_in[v][k]`` comes from factor ``v2t[v][k]``
            message_out: Outgoing messages from variables to factors,
                ``message_out[v][k]`` goes to factor ``v2t[v][k]``
        """
        self.message_in = message_in
        self.message_out = message_out

    def copy(self) -> "BPState":
        return BPState(deep_copy_messages(self.message_in),
                       deep_copy_messages(self.message_out))

    def max_difference(self, other: "BPState") -> float:
        """Largest absolute change of any message entry between two states."""
        diff = 0.0
        for mine, theirs in ((self.message_in, other.message_in),
                             (self.message_out, other.message_out)):
            for var_msgs, other_msgs in zip(mine, theirs):
                for msg, other_msg in zip(var_msgs, other_msgs):
                    diff = max(diff, max_abs_difference(msg, other_msg))
        return diff


class LoopyBeliefPropagation:
    """
    Message passing engine for a node table.

    The factor graph is built from the table the first time it is needed and
    then reused. Each :meth:`step` is one synchronous sweep: every
    variable-to-factor message is recomputed from the previous
    factor-to-variable messages, then every factor-to-variable message from
    those. Nothing is updated in place, so the result does not depend on
    update order.

    The engine never checks for convergence. On graphs with cycles there is
    no guarantee that it converges; the caller chooses how many steps to run.

    Args:
        table: Node table; nodes inserted after the factor graph is built are
            not seen by this engine
        normalize: Renormalize every message after computing it
        damping: Weight of the previous factor-to-variable message in
            ``[0, 1)``; 0 disables damping
    """

    def __init__(self, table: NodeTable, normalize: bool = True, damping: float = 0.0):
        if not 0.0 <= damping < 1.0:
            raise ValueError(f"damping must be in [0, 1), got {damping}")
        self.table = table
        self.normalize = normalize
        self.damping = damping
        self.dtype = table.dtype
        self.state: Optional[BPState] = None
        self._stale = False

    @cached_property
    def factor_graph(self) -> FactorGraph:
        return FactorGraph.from_node_table(self.table)

    @cached_property
    def evidence(self) -> Evidence:
        return Evidence(self.factor_graph.cards, dtype=self.dtype)

    def set_evidence(self, pairs: EvidencePairs) -> None:
        """
        Replace the observed values, as ``(node, value)`` pairs or a mapping.

        Messages computed so far belong to the previous evidence; call
        :meth:`reset_state` before the next :meth:`step`.
        """
        previous = self.evidence.as_dict()
        self.evidence.set(pairs)
        changed = self.evidence.as_dict() != previous
        self._stale = self.state is not None and (self._stale or changed)
        logger.debug("Evidence set to %s", self.evidence.as_dict())

    def reset_state(self) -> None:
        """
        Reinitialize all messages for the current evidence.

        Variable-to-factor messages start uniform, or at the observed delta for
        clamped variables. Factor-to-variable messages are then derived from
        them, so that beliefs are meaningful before the first step (a root's
        belief is its prior).
        """
        graph = self.factor_graph
        message_out = []
        for var in range(graph.nvars):
            init = self._clamped_or_uniform(var)
            message_out.append([init.clone() for _ in graph.v2t[var]])
        message_in = self._factor_to_variable(message_out)
        self.state = BPState(message_in, message_out)
        self._stale = False
        logger.debug("Reset message state (%d clamped variables)", len(self.evidence))

    def step(self) -> None:
        """Run one synchronous sweep of loopy belief propagation."""
        state = self._require_state()
        if self._stale:
            logger.warning(
                "step() called after set_evidence() without reset_state(); "
                "messages from the previous evidence are reused"
            )
        message_out = self._variable_to_factor(state.message_in)
        message_in = self._factor_to_variable(message_out)
        if self.damping > 0.0:
            message_in = self._damp(state.message_in, message_in)
        self.state = BPState(message_in, message_out)

    def beliefs(self) -> Dict[NodeId, LogProbVector]:
        """
        Current belief of every node.

        b(x) ∝ Π_{f∈ne(x)} μ_{f→x}(x), summed in log domain.
        """
        state = self._require_state()
        graph = self.factor_graph
        return {
            var: LogProbVector(log_sum(state.message_in[var], graph.cards[var], self.dtype))
            for var in range(graph.nvars)
        }

    def snapshot(self) -> BPState:
        """Deep copy of the current messages."""
        return self._require_state().copy()

    def _require_state(self) -> BPState:
        if self.state is None:
            raise RuntimeError("reset_state() must be called before step() or beliefs()")
        return self.state

    def _clamped_or_uniform(self, var: NodeId) -> torch.Tensor:
        if var in self.evidence:
            return self.evidence.delta(var)
        return torch.zeros(self.factor_graph.cards[var], dtype=self.dtype)

    def _normalized(self, msg: torch.Tensor) -> torch.Tensor:
        return normalize_log(msg) if self.normalize else msg

    def _variable_to_factor(self, message_in: List[List[torch.Tensor]]) -> List[List[torch.Tensor]]:
        r"""
        μ_{x→f}(x) = Σ_{g∈ne(x)\setminus f} μ_{g→x}(x)   (log domain)
        """
        graph = self.factor_graph
        message_out = []
        for var in range(graph.nvars):
            incoming = message_in[var]
            if var in self.evidence:
                delta = self.evidence.delta(var)
                message_out.append([delta.clone() for _ in incoming])
                continue
            var_messages = []
            for factor_pos in range(len(incoming)):
                others = (msg for pos, msg in enumerate(incoming) if pos != factor_pos)
                var_messages.append(
                    self._normalized(log_sum(others, graph.cards[var], self.dtype))
                )
            message_out.append(var_messages)
        return message_out

    def _factor_to_variable(self, message_out: List[List[torch.Tensor]]) -> List[List[torch.Tensor]]:
        r"""
        μ_{f→x}(x) = logsumexp_{scope \setminus x} [φ_f + Σ_{y≠x} μ_{y→f}(y)]
        """
        graph = self.factor_graph
        message_in = [[None] * len(graph.v2t[var]) for var in range(graph.nvars)]
        for factor_idx, factor in enumerate(graph.factors):
            positions = graph.factor_pos[factor_idx]
            incoming = [message_out[var][pos] for var, pos in zip(factor.vars, positions)]
            for axis, var in enumerate(factor.vars):
                if var in self.evidence:
                    msg = self.evidence.delta(var)
                else:
                    msg = self._normalized(log_marginalize(factor.log_values, incoming, axis))
                message_in[var][positions[axis]] = msg
        return message_in

    def _damp(self, old: List[List[torch.Tensor]], new: List[List[torch.Tensor]]) -> List[List[torch.Tensor]]:
        return [
            [log_mix(old_msg, new_msg, self.damping) for old_msg, new_msg in zip(old_msgs, new_msgs)]
            for old_msgs, new_msgs in zip(old, new)
        ]
