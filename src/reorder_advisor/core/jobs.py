from collections.abc import Sequence

from reorder_advisor.helpers import build_hash
from reorder_advisor.models import (
    DeclarationKind,
    DeclarationNode,
    Job,
    JobKind,
    MoveFact,
    Reconstruction,
    Solution,
)


def build_fingerprint(nodes: Sequence[DeclarationNode]) -> str:
    return build_hash("D", *(node.id for node in nodes))


def build_job_hash(file_path: str, fingerprint: str, declaration_id: str, new_index: int) -> str:
    return build_hash("J", file_path, fingerprint, declaration_id, str(new_index))


def build_identifiers_label(node: DeclarationNode) -> str:
    if node.kind is DeclarationKind.BLOCK or not node.identifiers:
        return node.kind.value
    if len(node.identifiers) > 1:
        return f"({', '.join(node.identifiers)})"
    return node.identifiers[0]


def build_title(solution: Solution) -> str:
    order = solution.order
    if solution.new_index == 0:
        label = f"Move before {build_identifiers_label(order[1])}"
    else:
        label = f"Move after {build_identifiers_label(order[solution.new_index - 1])}"
    if solution.reason is not None:
        label += f" ({solution.reason})"
    return label


def build_move_job(
    fact: MoveFact,
    solution: Solution,
    reconstruction: Reconstruction,
    character_difference: int = 0,
) -> Job:
    declaration = fact.top_level_nodes[solution.old_index]
    return Job(
        hash=build_job_hash(fact.file_path, fact.fingerprint, declaration.id, solution.new_index),
        kind=JobKind.MOVE_TOP_LEVEL_NODE,
        file_path=fact.file_path,
        title=build_title(solution),
        range=reconstruction.range,
        text=reconstruction.text,
        position=reconstruction.position,
        fingerprint=fact.fingerprint,
        language=fact.language,
        declaration_id=declaration.id,
        old_index=solution.old_index,
        new_index=solution.new_index,
        character_difference=character_difference,
    )
