from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from reorder_advisor.core.coefficients import calculate_coefficient
from reorder_advisor.errors import InvalidMoveError
from reorder_advisor.models import Coefficient, DeclarationNode, Solution

T = TypeVar("T")

REASON_DEPENDENCIES = "more ordered dependencies"
REASON_SIMILARITY = "more name similarity"
REASON_KIND = "more same-type blocks"

# scores closer than this are treated as equal
_SCORE_PRECISION = 9


@dataclass(frozen=True)
class CoefficientWeights:
    dependency: float = 1.0
    similarity: float = 1.0
    kind: float = 1.0

    def __post_init__(self) -> None:
        if min(self.dependency, self.similarity, self.kind) < 0:
            raise ValueError("Coefficient weights must be non-negative")

    def score(self, coefficient: Coefficient) -> float:
        return (
            self.dependency * coefficient.dependency_coefficient
            + self.similarity * coefficient.similarity_coefficient
            + self.kind * coefficient.kind_coefficient
        )


def validate_move(length: int, old_index: int, new_index: int) -> None:
    if not (0 <= old_index < length and 0 <= new_index < length) or old_index == new_index:
        raise InvalidMoveError(length, old_index, new_index)


def move_node(items: Sequence[T], old_index: int, new_index: int) -> list[T]:
    validate_move(len(items), old_index, new_index)
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def build_reason(before: Coefficient, after: Coefficient, weights: CoefficientWeights) -> str | None:
    """Name the penalty the move reduced the most, or None when no single one stands out."""
    reductions = {
        REASON_DEPENDENCIES: weights.dependency * (before.dependency_coefficient - after.dependency_coefficient),
        REASON_SIMILARITY: weights.similarity * (before.similarity_coefficient - after.similarity_coefficient),
        REASON_KIND: weights.kind * (before.kind_coefficient - after.kind_coefficient),
    }
    ranked = sorted(reductions.items(), key=lambda item: item[1], reverse=True)
    best_reason, best = ranked[0]
    if round(best, _SCORE_PRECISION) <= 0 or round(best - ranked[1][1], _SCORE_PRECISION) <= 0:
        return None
    return best_reason


def build_solutions(
    nodes: Sequence[DeclarationNode],
    weights: CoefficientWeights | None = None,
    old_indices: Iterable[int] | None = None,
) -> list[Solution]:
    """Rank every improving single-declaration move, best first."""
    weights = weights or CoefficientWeights()
    nodes = tuple(nodes)
    if len(nodes) < 2:
        return []

    current = calculate_coefficient(nodes)
    current_score = round(weights.score(current), _SCORE_PRECISION)
    candidates = range(len(nodes)) if old_indices is None else old_indices

    solutions: list[Solution] = []
    for old_index in candidates:
        if not 0 <= old_index < len(nodes):
            raise InvalidMoveError(len(nodes), old_index, old_index)
        for new_index in range(len(nodes)):
            if new_index == old_index:
                continue
            coefficient = calculate_coefficient(move_node(nodes, old_index, new_index))
            score = round(weights.score(coefficient), _SCORE_PRECISION)
            if score >= current_score:
                continue
            solutions.append(
                Solution(
                    old_index=old_index,
                    new_index=new_index,
                    nodes=nodes,
                    coefficient=coefficient,
                    score=score,
                    reason=build_reason(current, coefficient, weights),
                )
            )

    solutions.sort(key=lambda s: (s.score, abs(s.new_index - s.old_index), s.old_index, s.new_index))
    return solutions
