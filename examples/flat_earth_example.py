"""
Flat Earth Example
==================

Weighing evidence about the shape of the Earth with a network authored in
log-odds. Only the difference between the log values of a CPT slice
matters, so every node is inserted with ``normalize=True``.

The values are base-10 log ratios, scaled by ln(10) to natural logs:

    5 : very much in favor
    0 : undecided
   -5 : very much against

Run with: python examples/flat_earth_example.py
"""

import math
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import torch

from loopybayes import BayesNet

LOG10 = math.log(10.0)


def log_odds(values):
    return torch.tensor(values, dtype=torch.float64) * LOG10


def build_network():
    net = BayesNet()

    # 0 = round, 1 = flat; no prior preference
    flat = net.insert_node_from_log_probabilities([], [0.0, 0.0], normalize=True)

    # A conspiracy hiding a flat Earth: pointless if it is round (-5),
    # unlikely but possible if it is flat (-2)
    conspiracy = net.insert_node_from_log_probabilities(
        [flat], log_odds([[0.0, 0.0],
                          [-5.0, -2.0]]), normalize=True
    )

    # The Earth looks flat from the ground
    looks_flat = net.insert_node_from_log_probabilities(
        [flat], log_odds([[0.0, 0.0],
                          [3.0, 5.0]]), normalize=True
    )

    # A horizon behind which objects disappear
    horizon = net.insert_node_from_log_probabilities(
        [flat], log_odds([[0.0, 0.0],
                          [5.0, 0.0]]), normalize=True
    )

    # Photos from space showing a round Earth; axes (photos, flat, conspiracy)
    photos = net.insert_node_from_log_probabilities(
        [flat, conspiracy], log_odds([[[0.0, 0.0], [0.0, 0.0]],
                                      [[4.0, 4.0], [-4.0, 5.0]]]), normalize=True
    )

    # A credible leak about the conspiracy
    leak = net.insert_node_from_log_probabilities(
        [conspiracy], log_odds([[0.0, 0.0],
                                [-4.0, 3.0]]), normalize=True
    )
    return net, dict(flat=flat, conspiracy=conspiracy, looks_flat=looks_flat,
                     horizon=horizon, photos=photos, leak=leak)


def main():
    net, nodes = build_network()
    net.set_evidence([
        (nodes["looks_flat"], 1),  # the Earth does look flat
        (nodes["horizon"], 1),     # there is a horizon
        (nodes["photos"], 1),      # photos from space look round
        (nodes["leak"], 0),        # no leak was ever seen
    ])
    net.reset_state()
    for _ in range(20):
        net.step()
    beliefs = net.beliefs()

    print("log10 evidence ratios (5 = very in favor, 0 = undecided, -5 = very against):")
    for name in ("flat", "conspiracy"):
        logp = beliefs[nodes[name]].log_probabilities
        print(f" - {name}: {float(logp[1] - logp[0]) / LOG10:.3f}")


if __name__ == "__main__":
    main()
