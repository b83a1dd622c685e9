"""Penalty measures over a candidate ordering of declarations.

All three return values in ``[0, 1]`` (the dependency one can exceed 1 for
densely tangled files) and lower is better. They know nothing about weights;
the solution search combines them.
"""

from collections.abc import Sequence
from itertools import pairwise

from rapidfuzz.distance import JaroWinkler

from reorder_advisor.models import Coefficient, DeclarationNode


def calculate_dependency_coefficient(nodes: Sequence[DeclarationNode]) -> float:
    """Share of declarations referencing something defined later in the ordering."""
    if not nodes:
        return 0.0

    violations = 0
    for index, node in enumerate(nodes):
        if not node.child_identifiers:
            continue
        for later in nodes[index + 1 :]:
            if not node.child_identifiers.isdisjoint(later.identifiers):
                violations += 1

    return violations / len(nodes)


def calculate_similarity_coefficient(nodes: Sequence[DeclarationNode], reserved: float = 0) -> float:
    """Jaro-Winkler distance of the closest pair of neighbouring names.

    ``reserved`` is accepted for call compatibility and has no effect.
    """
    if len(nodes) < 2:
        return 0.0

    return min(
        JaroWinkler.normalized_distance(left.primary_identifier, right.primary_identifier)
        for left, right in pairwise(nodes)
    )


def calculate_kind_coefficient(nodes: Sequence[DeclarationNode], reserved: float = 0) -> float:
    """Share of neighbouring declarations whose kinds differ.

    ``reserved`` is accepted for call compatibility and has no effect.
    """
    if len(nodes) < 2:
        return 0.0

    changes = sum(1 for left, right in pairwise(nodes) if left.kind != right.kind)
    return changes / (len(nodes) - 1)


def calculate_coefficient(nodes: Sequence[DeclarationNode]) -> Coefficient:
    return Coefficient(
        dependency_coefficient=calculate_dependency_coefficient(nodes),
        similarity_coefficient=calculate_similarity_coefficient(nodes, 0),
        kind_coefficient=calculate_kind_coefficient(nodes, 0),
    )
