from collections.abc import Sequence

from reorder_advisor.core.solutions import validate_move
from reorder_advisor.errors import InvalidMoveError
from reorder_advisor.models import Position, Reconstruction, StringNode, TextRange


def detect_line_separator(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def offset_to_position(text: str, offset: int, separator: str) -> Position:
    offset = max(0, min(offset, len(text)))
    lines = text[:offset].split(separator)
    return Position(line=len(lines) - 1, column=len(lines[-1]))


def position_to_offset(text: str, line: int, column: int, separator: str) -> int:
    lines = text.split(separator)
    line = max(0, min(line, len(lines) - 1))
    offset = sum(len(previous) + len(separator) for previous in lines[:line])
    return offset + max(0, min(column, len(lines[line])))


def full_text_range(text: str, separator: str) -> TextRange:
    return TextRange(start=Position(line=0, column=0), end=offset_to_position(text, len(text), separator))


def _string_node_position(string_nodes: Sequence[StringNode], index: int) -> int:
    for position, string_node in enumerate(string_nodes):
        if string_node.top_level_node_index == index:
            return position
    raise InvalidMoveError(len(string_nodes), index, index)


def move_string_nodes(string_nodes: Sequence[StringNode], old_index: int, new_index: int) -> list[StringNode]:
    """Relocate declaration ``old_index`` together with one neighbouring separator.

    The separator before the declaration travels with it; the first declaration
    takes the separator after it instead, so the file header never moves.
    """
    length = sum(1 for node in string_nodes if node.top_level_node_index is not None)
    validate_move(length, old_index, new_index)

    nodes = list(string_nodes)
    position = _string_node_position(nodes, old_index)
    if old_index > 0:
        separator, declaration = nodes[position - 1], nodes[position]
        del nodes[position - 1 : position + 1]
    else:
        declaration, separator = nodes[position], nodes[position + 1]
        del nodes[position : position + 2]

    target = _string_node_position(nodes, new_index)
    if new_index > old_index:
        nodes[target + 1 : target + 1] = [separator, declaration]
    else:
        nodes[target:target] = [declaration, separator]
    return nodes


def reconstruct(
    old_index: int,
    new_index: int,
    string_nodes: Sequence[StringNode],
    separator: str,
    character_difference: int,
) -> Reconstruction:
    """Build the whole-file replacement for a move and the cursor position after it."""
    original_text = "".join(node.text for node in string_nodes)
    moved = move_string_nodes(string_nodes, old_index, new_index)

    text = ""
    declaration_start = 0
    for node in moved:
        if node.top_level_node_index == old_index:
            declaration_start = len(text)
        text += node.text

    return Reconstruction(
        text=text,
        range=full_text_range(original_text, separator),
        position=offset_to_position(text, declaration_start + character_difference, separator),
    )
