"""
Utility functions for tensors and message structures.
"""

from typing import List

import numpy as np
import torch


def as_tensor(values, dtype=torch.float64) -> torch.Tensor:
    """
    Copy a dense numeric array into a tensor of ``dtype``.

    Accepts torch tensors, numpy arrays, nested sequences and scalars.
    """
    if isinstance(values, torch.Tensor):
        return values.detach().to(dtype=dtype).clone()
    if isinstance(values, np.ndarray):
        return torch.from_numpy(np.array(values, dtype=np.float64)).to(dtype=dtype)
    return torch.tensor(values, dtype=dtype)


def deep_copy_messages(messages: List[List[torch.Tensor]]) -> List[List[torch.Tensor]]:
    """
    Deep copy message structure.

    Args:
        messages: Nested list of message tensors

    Returns:
        Deep copy of messages
    """
    return [[msg.clone() for msg in var_msgs] for var_msgs in messages]
