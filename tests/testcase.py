import itertools
import math

import torch


def exact_marginals(table, evidence=None):
    """Marginals of every node by enumerating the full joint distribution."""
    evidence = evidence or {}
    cards = table.cardinalities()
    assignments = list(itertools.product(*[range(c) for c in cards]))
    weights = []
    for assignment in assignments:
        if any(assignment[node] != val for node, val in evidence.items()):
            weights.append(0.0)
            continue
        weight = 1.0
        for node in table:
            idx = (assignment[node],) + tuple(assignment[p] for p in table.parents_of(node))
            weight *= math.exp(float(table.log_cpt(node)[idx]))
        weights.append(weight)
    total = sum(weights)
    marginals = {}
    for node, card in enumerate(cards):
        values = []
        for value in range(card):
            mass = 0.0
            for assignment, weight in zip(assignments, weights):
                if assignment[node] == value:
                    mass += weight
            values.append(mass / total if total > 0 else 0.0)
        marginals[node] = torch.tensor(values, dtype=torch.float64)
    return marginals


def run_steps(engine, n):
    for _ in range(n):
        engine.step()
    return engine.beliefs()
