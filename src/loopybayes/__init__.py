"""
loopybayes: approximate marginal inference in discrete Bayesian networks
with loopy belief propagation, in log domain on PyTorch tensors.
"""

from loopybayes.belief_propagation import BPState, LoopyBeliefPropagation
from loopybayes.errors import (
    BayesNetError,
    InvalidProbability,
    OutOfRange,
    ShapeMismatch,
    UnknownNode,
)
from loopybayes.evidence import Evidence
from loopybayes.factor_graph import Factor, FactorGraph
from loopybayes.logmath import log_marginalize, log_sum_exp, normalize_log, safe_log
from loopybayes.network import BayesNet
from loopybayes.node_table import Node, NodeTable
from loopybayes.prob_vector import LogProbVector

__version__ = "0.1.0"
__all__ = [
    # Network and inference
    "BayesNet",
    "NodeTable",
    "Node",
    "FactorGraph",
    "Factor",
    "LoopyBeliefPropagation",
    "BPState",
    "Evidence",
    "LogProbVector",
    # Log-domain math
    "log_sum_exp",
    "log_marginalize",
    "normalize_log",
    "safe_log",
    # Errors
    "BayesNetError",
    "ShapeMismatch",
    "InvalidProbability",
    "OutOfRange",
    "UnknownNode",
]
