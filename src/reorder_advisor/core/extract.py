import logging
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from reorder_advisor.core.classifiers import DeclarationClassifier, get_classifier, node_text
from reorder_advisor.helpers import build_hash
from reorder_advisor.models import DeclarationKind, DeclarationNode, StringNode

logger = logging.getLogger(__name__)


class _CharOffsets:
    """Translate tree-sitter byte offsets into offsets of the decoded text."""

    def __init__(self, text: str, source_bytes: bytes) -> None:
        self._mapping: list[int] | None = None
        if len(text) == len(source_bytes):
            return
        mapping = [0] * (len(source_bytes) + 1)
        byte_offset = 0
        for char_offset, char in enumerate(text):
            width = len(char.encode("utf-8"))
            for k in range(width):
                mapping[byte_offset + k] = char_offset
            byte_offset += width
        mapping[byte_offset] = len(text)
        self._mapping = mapping

    def __call__(self, byte_offset: int) -> int:
        if self._mapping is None:
            return byte_offset
        return self._mapping[byte_offset]


def collect_identifiers(node: Node, identifier_types: frozenset[str]) -> list[str]:
    identifiers: list[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in identifier_types:
            identifiers.append(node_text(current))
            continue
        stack.extend(reversed(current.children))
    return identifiers


def build_string_nodes(text: str, nodes: list[DeclarationNode]) -> list[StringNode]:
    if not nodes:
        return [StringNode(text=text)]

    string_nodes = [StringNode(text=text[: nodes[0].text_start])]
    for index, node in enumerate(nodes):
        if index > 0:
            string_nodes.append(StringNode(text=text[nodes[index - 1].end : node.text_start]))
        string_nodes.append(StringNode(text=text[node.text_start : node.end], top_level_node_index=index))
    string_nodes.append(StringNode(text=text[nodes[-1].end :]))
    return string_nodes


def _only_line_break_between(source_bytes: bytes, first: Node, second: Node) -> bool:
    gap = source_bytes[first.end_byte : second.start_byte]
    return not gap.strip() and gap.count(b"\n") <= 1


def _text_start(text: str, offset: int, floor: int) -> int:
    line_start = text.rfind("\n", 0, offset) + 1
    if line_start >= floor and not text[line_start:offset].strip():
        return line_start
    return offset


def _build_node(
    child: Node,
    kind: DeclarationKind,
    classifier: DeclarationClassifier,
    text: str,
    start: int,
    text_start: int,
    node_start: int,
    end: int,
) -> DeclarationNode:
    own_text = text[node_start:end]
    if kind is DeclarationKind.BLOCK:
        declared = [build_hash("block", own_text)]
    else:
        declared = classifier.declared_identifiers(child, kind)
    identifiers = tuple(dict.fromkeys(name for name in declared if name))
    child_identifiers = frozenset(collect_identifiers(child, classifier.identifier_types)) - set(identifiers)
    return DeclarationNode(
        kind=kind,
        id=build_hash(own_text),
        start=start,
        end=end,
        text_start=text_start,
        identifiers=identifiers,
        child_identifiers=child_identifiers,
    )


def extract_declarations(text: str, language: str) -> tuple[list[DeclarationNode], list[StringNode]]:
    """Split ``text`` into top-level declarations and the string nodes that rebuild it.

    Sources that cannot be parsed yield no declarations and a single string node.
    """
    try:
        classifier = get_classifier(language)
        parser = get_parser(cast(SupportedLanguage, language))
    except (ValueError, LookupError) as exc:
        logger.warning("Cannot extract declarations: %s", exc)
        return [], build_string_nodes(text, [])

    source_bytes = text.encode("utf-8")
    root = parser.parse(source_bytes).root_node
    if root.has_error:
        logger.debug("Skipping declaration extraction: %s source has syntax errors", language)
        return [], build_string_nodes(text, [])

    to_char = _CharOffsets(text, source_bytes)
    nodes: list[DeclarationNode] = []
    pending_comments: list[Node] = []
    previous: Node | None = None
    previous_declared = False
    previous_end = 0

    for child in root.named_children:
        if child.type in classifier.comment_types:
            # a comment trailing the previous statement on its line belongs to that statement
            if previous is not None and child.start_point[0] == previous.end_point[0]:
                if previous_declared:
                    nodes[-1] = nodes[-1].model_copy(update={"end": to_char(child.end_byte)})
                    previous_end = nodes[-1].end
                continue
            if pending_comments and not _only_line_break_between(source_bytes, pending_comments[-1], child):
                pending_comments = []
            pending_comments.append(child)
            continue

        kind = classifier.classify(child)
        if kind is None:
            pending_comments = []
            previous = child
            previous_declared = False
            continue

        if pending_comments and not _only_line_break_between(source_bytes, pending_comments[-1], child):
            pending_comments = []
        first = pending_comments[0] if pending_comments else child
        text_start = _text_start(text, to_char(first.start_byte), previous_end)
        node = _build_node(
            child,
            kind,
            classifier,
            text,
            start=text_start if not nodes else previous_end,
            text_start=text_start,
            node_start=to_char(child.start_byte),
            end=to_char(child.end_byte),
        )
        nodes.append(node)
        previous_end = node.end
        pending_comments = []
        previous = child
        previous_declared = True

    return nodes, build_string_nodes(text, nodes)
