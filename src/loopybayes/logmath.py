"""
Log-domain primitives shared by the network and the message passing engine.

Every probability product is an addition of logs and every probability sum
goes through :func:`log_sum_exp`.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple, Union

import torch

Dims = Union[int, Sequence[int], None]


def _as_dims(x: torch.Tensor, dim: Dims) -> Tuple[int, ...]:
    if dim is None:
        return tuple(range(x.ndim))
    if isinstance(dim, int):
        dim = (dim,)
    return tuple(sorted({d % x.ndim for d in dim}))


def safe_log(tensor: torch.Tensor) -> torch.Tensor:
    """Convert probabilities to log domain; zeros map to -inf."""
    neg_inf = torch.tensor(float("-inf"), dtype=tensor.dtype, device=tensor.device)
    return torch.where(tensor > 0, torch.log(tensor), neg_inf)


def log_sum_exp(x: torch.Tensor, dim: Dims = None, keepdim: bool = False) -> torch.Tensor:
    """
    Compute ``log(sum(exp(x)))`` over ``dim`` without overflow or underflow.

    The maximum along the reduced axes is subtracted before exponentiating
    and added back afterwards. A slice that is entirely ``-inf`` reduces to
    ``-inf``.

    Args:
        x: Log-domain tensor
        dim: Axis or axes to reduce (default: all axes)
        keepdim: Keep the reduced axes with size 1

    Returns:
        Reduced log-domain tensor
    """
    dims = _as_dims(x, dim)
    if not dims:
        return x.clone()

    shift = torch.amax(x, dim=dims, keepdim=True)
    # all -inf slices: shifting by 0 keeps exp() at exactly 0
    shift = torch.where(torch.isfinite(shift), shift, torch.zeros_like(shift))
    summed = torch.exp(x - shift).sum(dim=dims, keepdim=True)
    result = torch.log(summed) + shift

    if not keepdim:
        result = result.reshape([s for i, s in enumerate(x.shape) if i not in dims])
    return result


def normalize_log(x: torch.Tensor, dim: Dims = 0) -> torch.Tensor:
    """
    Renormalize log-probabilities so that each slice along ``dim`` sums to 1.

    Slices with zero total mass are returned unchanged.
    """
    lse = log_sum_exp(x, dim=dim, keepdim=True)
    return torch.where(torch.isfinite(lse), x - lse, x)


def log_marginalize(
    log_potential: torch.Tensor,
    log_messages: Sequence[Optional[torch.Tensor]],
    keep_axis: int,
) -> torch.Tensor:
    r"""
    Sum out every axis of a log-potential except ``keep_axis``.

    .. math::

        m(x_k) = \log \sum_{x_{-k}} \exp\Big(\phi(x) + \sum_{j \neq k} m_j(x_j)\Big)

    Args:
        log_potential: Factor tensor in log domain, one axis per scope variable
        log_messages: One incoming log message per axis; the entry at
            ``keep_axis`` is ignored and may be ``None``
        keep_axis: Axis of the receiving variable

    Returns:
        Log message over the kept axis, shape ``(log_potential.shape[keep_axis],)``
    """
    ndims = log_potential.ndim
    if ndims == 1:
        return log_potential.clone()

    result = log_potential
    for axis in range(ndims):
        if axis == keep_axis:
            continue
        shape = [1] * ndims
        shape[axis] = log_potential.shape[axis]
        result = result + log_messages[axis].view(*shape)

    sum_dims = [axis for axis in range(ndims) if axis != keep_axis]
    return log_sum_exp(result, dim=sum_dims)


def log_mix(old: torch.Tensor, new: torch.Tensor, weight: float) -> torch.Tensor:
    """
    Log of ``weight * exp(old) + (1 - weight) * exp(new)``.
    """
    if weight == 0.0:
        return new.clone()
    stacked = torch.stack([
        old + torch.log(torch.tensor(weight, dtype=old.dtype)),
        new + torch.log(torch.tensor(1.0 - weight, dtype=new.dtype)),
    ])
    return log_sum_exp(stacked, dim=0)


def max_abs_difference(a: torch.Tensor, b: torch.Tensor) -> float:
    """Largest elementwise |a - b|; positions where both are equal count as 0."""
    diff = torch.where(a == b, torch.zeros_like(a), torch.abs(a - b))
    if diff.numel() == 0:
        return 0.0
    return float(diff.max())


def log_sum(messages: Iterable[torch.Tensor], size: int, dtype=torch.float64) -> torch.Tensor:
    """Probability-space product of messages, i.e. the sum of their logs."""
    total = torch.zeros(size, dtype=dtype)
    for msg in messages:
        total = total + msg
    return total
