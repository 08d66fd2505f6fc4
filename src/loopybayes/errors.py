"""
Exceptions raised while building a network or setting evidence.
"""


class BayesNetError(Exception):
    """Base class for all loopybayes errors."""


class ShapeMismatch(BayesNetError, ValueError):
    """CPT dimensions disagree with the declared parents."""


class InvalidProbability(BayesNetError, ValueError):
    """A CPT slice is not a valid probability distribution."""


class OutOfRange(BayesNetError, IndexError):
    """An evidence value is outside the node's cardinality."""


class UnknownNode(BayesNetError, LookupError):
    """A node identifier that the network does not know."""

    def __init__(self, node):
        super().__init__(f"Unknown node: {node!r}")
        self.node = node
