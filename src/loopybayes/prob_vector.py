"""
Log-domain probability vectors, used for beliefs.
"""

from __future__ import annotations

import torch

from .logmath import log_sum_exp, normalize_log


class LogProbVector:
    """
    A probability vector stored as natural logarithms.

    The content may be unnormalized: adding a constant to every entry does
    not change the distribution it represents.
    """

    def __init__(self, log_probabilities: torch.Tensor):
        if log_probabilities.ndim != 1:
            raise ValueError(
                f"LogProbVector expects a 1-D tensor, got shape {tuple(log_probabilities.shape)}"
            )
        self._log_probabilities = log_probabilities

    @classmethod
    def uniform(cls, n: int, dtype=torch.float64) -> "LogProbVector":
        """Unnormalized uniform distribution over ``n`` values."""
        return cls(torch.zeros(n, dtype=dtype))

    @classmethod
    def deterministic(cls, n: int, i: int, dtype=torch.float64) -> "LogProbVector":
        """
        Distribution choosing value ``i`` out of ``n`` with certainty.

        If ``i`` is not in ``[0, n)`` every value gets probability 0.
        """
        data = torch.full((n,), float("-inf"), dtype=dtype)
        if 0 <= i < n:
            data[i] = 0.0
        return cls(data)

    @classmethod
    def from_log_probabilities(cls, log_probabilities) -> "LogProbVector":
        return cls(torch.as_tensor(log_probabilities, dtype=torch.float64))

    @property
    def log_probabilities(self) -> torch.Tensor:
        """The underlying log values (do not modify in place)."""
        return self._log_probabilities

    def as_probabilities(self) -> torch.Tensor:
        """
        Normalized probabilities.

        Exponentiates the max-shifted log vector and divides by the total.
        A vector with zero total mass gives all zeros.
        """
        logp = self._log_probabilities
        if logp.numel() == 0:
            return logp.clone()
        shift = logp.max()
        if not torch.isfinite(shift):
            return torch.zeros_like(logp)
        probabilities = torch.exp(logp - shift)
        return probabilities / probabilities.sum()

    def renormalize(self) -> "LogProbVector":
        """Copy whose log values are those of a normalized distribution."""
        return LogProbVector(normalize_log(self._log_probabilities))

    def prod(self, other: "LogProbVector") -> "LogProbVector":
        """
        Probability-space product with ``other``.

        Log values are summed, so the result is in general unnormalized.
        """
        return LogProbVector(self._log_probabilities + other._log_probabilities)

    def log_normalizer(self) -> float:
        return float(log_sum_exp(self._log_probabilities))

    def __len__(self):
        return self._log_probabilities.shape[0]

    def __repr__(self):
        probs = [round(float(p), 4) for p in self.as_probabilities()]
        return f"LogProbVector(probabilities={probs})"
