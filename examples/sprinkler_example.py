"""
Sprinkler Example
=================

The classic rain / sprinkler / wet grass network:

    +----------+          +----------------------+
    | It rains | -------> | Sprinkler is running |
    +----------+          +----------------------+
          |                 |
          +----+     +------+
               |     |
               v     v
           +--------------+
           | Grass is wet |
           +--------------+

The rain -> wet and rain -> sprinkler -> wet paths form a loop, so the
marginals below are approximate.

Run with: python examples/sprinkler_example.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from loopybayes import BayesNet


def build_network():
    net = BayesNet()

    # p(not rain) = 0.8, p(rain) = 0.2
    rain = net.insert_node_from_probabilities([], [0.8, 0.2])

    # p(not sprinkler | not rain) = 0.60, p(not sprinkler | rain) = 0.99
    # p(    sprinkler | not rain) = 0.40, p(    sprinkler | rain) = 0.01
    sprinkler = net.insert_node_from_probabilities(
        [rain], [[0.60, 0.99],
                 [0.40, 0.01]]
    )

    # axes: (wet, rain, sprinkler)
    wet = net.insert_node_from_probabilities(
        [rain, sprinkler], [[[1.0, 0.1], [0.2, 0.01]],
                            [[0.0, 0.9], [0.8, 0.99]]]
    )
    return net, rain, sprinkler, wet


def infer(net, evidence, steps):
    net.set_evidence(evidence)
    net.reset_state()
    for _ in range(steps):
        net.step()
    return net.beliefs()


def main():
    net, rain, sprinkler, wet = build_network()
    names = {rain: "Rain", sprinkler: "Sprinkler", wet: "Wet"}

    scenarios = [
        ("raw marginal probabilities", [], 10),
        ("assuming the grass is wet", [(wet, 1)], 50),
        ("assuming the sprinkler is running", [(sprinkler, 1)], 10),
        ("assuming it rains", [(rain, 1)], 10),
    ]
    for title, evidence, steps in scenarios:
        print(f"===== {title} =====")
        beliefs = infer(net, evidence, steps)
        for node, name in names.items():
            probs = [round(float(p), 4) for p in beliefs[node].as_probabilities()]
            print(f"    {name}: {probs}")
        print()


if __name__ == "__main__":
    main()
