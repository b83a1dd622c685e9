"""Map each grammar's native node types onto the declaration kinds.

The extractor only talks to a ``DeclarationClassifier``; a new language is a new
classifier registered here.
"""

from typing import Protocol

from tree_sitter import Node

from reorder_advisor.models import DeclarationKind


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


class DeclarationClassifier(Protocol):
    identifier_types: frozenset[str]
    comment_types: frozenset[str]

    def classify(self, node: Node) -> DeclarationKind | None: ...

    def declared_identifiers(self, node: Node, kind: DeclarationKind) -> list[str]: ...


class TreeSitterClassifier:
    kinds: dict[str, DeclarationKind] = {}
    # wrapper node type -> field holding the wrapped declaration (None: first declaration child)
    wrappers: dict[str, str | None] = {}
    identifier_types: frozenset[str] = frozenset({"identifier"})
    comment_types: frozenset[str] = frozenset({"comment"})

    def unwrap(self, node: Node) -> Node:
        while node.type in self.wrappers:
            field = self.wrappers[node.type]
            inner = node.child_by_field_name(field) if field else None
            if inner is None:
                inner = next(
                    (child for child in node.named_children if child.type in self.kinds or child.type in self.wrappers),
                    None,
                )
            if inner is None:
                return node
            node = inner
        return node

    def classify(self, node: Node) -> DeclarationKind | None:
        return self.kinds.get(self.unwrap(node).type)

    def declared_identifiers(self, node: Node, kind: DeclarationKind) -> list[str]:
        name = self.unwrap(node).child_by_field_name("name")
        return [node_text(name)] if name is not None else []


class TypeScriptClassifier(TreeSitterClassifier):
    """Also serves tsx and javascript, whose top-level node types are a subset."""

    kinds = {
        "class_declaration": DeclarationKind.CLASS,
        "abstract_class_declaration": DeclarationKind.CLASS,
        "function_declaration": DeclarationKind.FUNCTION,
        "generator_function_declaration": DeclarationKind.FUNCTION,
        "function_signature": DeclarationKind.FUNCTION,
        "interface_declaration": DeclarationKind.INTERFACE,
        "type_alias_declaration": DeclarationKind.TYPE_ALIAS,
        "enum_declaration": DeclarationKind.ENUM,
        "lexical_declaration": DeclarationKind.VARIABLE,
        "variable_declaration": DeclarationKind.VARIABLE,
        "statement_block": DeclarationKind.BLOCK,
    }
    wrappers = {
        "export_statement": "declaration",
        "ambient_declaration": None,
    }
    identifier_types = frozenset(
        {
            "identifier",
            "type_identifier",
            "property_identifier",
            "private_property_identifier",
            "shorthand_property_identifier",
            "shorthand_property_identifier_pattern",
        }
    )

    def declared_identifiers(self, node: Node, kind: DeclarationKind) -> list[str]:
        if kind is not DeclarationKind.VARIABLE:
            return super().declared_identifiers(node, kind)
        names: list[str] = []
        for declarator in self.unwrap(node).named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            # destructuring patterns introduce no single name
            if name is not None and name.type == "identifier":
                names.append(node_text(name))
        return names


_PYTHON_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_PYTHON_INTERFACE_BASES = frozenset({"Protocol", "ABC", "ABCMeta"})


class PythonClassifier(TreeSitterClassifier):
    kinds = {
        "class_definition": DeclarationKind.CLASS,
        "function_definition": DeclarationKind.FUNCTION,
        "type_alias_statement": DeclarationKind.TYPE_ALIAS,
        "if_statement": DeclarationKind.BLOCK,
        "for_statement": DeclarationKind.BLOCK,
        "while_statement": DeclarationKind.BLOCK,
        "with_statement": DeclarationKind.BLOCK,
        "try_statement": DeclarationKind.BLOCK,
        "match_statement": DeclarationKind.BLOCK,
    }
    wrappers = {"decorated_definition": "definition"}

    def classify(self, node: Node) -> DeclarationKind | None:
        inner = self.unwrap(node)
        if inner.type == "expression_statement":
            return DeclarationKind.VARIABLE if _first_assignment(inner) is not None else None
        kind = self.kinds.get(inner.type)
        if kind is DeclarationKind.CLASS:
            bases = set(_python_base_names(inner))
            if bases & _PYTHON_ENUM_BASES:
                return DeclarationKind.ENUM
            if bases & _PYTHON_INTERFACE_BASES:
                return DeclarationKind.INTERFACE
        return kind

    def declared_identifiers(self, node: Node, kind: DeclarationKind) -> list[str]:
        inner = self.unwrap(node)
        if kind is DeclarationKind.VARIABLE:
            names: list[str] = []
            assignment = _first_assignment(inner)
            while assignment is not None and assignment.type == "assignment":
                names.extend(_python_target_names(assignment.child_by_field_name("left")))
                assignment = assignment.child_by_field_name("right")
            return names
        if kind is DeclarationKind.TYPE_ALIAS:
            left = inner.child_by_field_name("left")
            first = _first_descendant(left, self.identifier_types)
            return [node_text(first)] if first is not None else []
        return super().declared_identifiers(node, kind)


def _first_assignment(statement: Node) -> Node | None:
    for child in statement.named_children:
        if child.type == "assignment":
            return child
    return None


def _python_target_names(target: Node | None) -> list[str]:
    if target is None:
        return []
    if target.type == "identifier":
        return [node_text(target)]
    if target.type in {"pattern_list", "tuple_pattern", "list_pattern"}:
        names: list[str] = []
        for child in target.named_children:
            names.extend(_python_target_names(child))
        return names
    return []


def _python_base_names(class_node: Node) -> list[str]:
    superclasses = class_node.child_by_field_name("superclasses")
    if superclasses is None:
        return []
    names: list[str] = []
    for base in superclasses.named_children:
        if base.type in {"keyword_argument", "subscript"}:
            value = base.child_by_field_name("value")
            if value is not None:
                base = value
        names.append(node_text(base).rsplit(".", 1)[-1])
    return names


def _first_descendant(node: Node | None, types: frozenset[str]) -> Node | None:
    if node is None:
        return None
    if node.type in types:
        return node
    for child in node.children:
        found = _first_descendant(child, types)
        if found is not None:
            return found
    return None


class JavaClassifier(TreeSitterClassifier):
    kinds = {
        "class_declaration": DeclarationKind.CLASS,
        "record_declaration": DeclarationKind.CLASS,
        "interface_declaration": DeclarationKind.INTERFACE,
        "annotation_type_declaration": DeclarationKind.INTERFACE,
        "enum_declaration": DeclarationKind.ENUM,
    }
    identifier_types = frozenset({"identifier", "type_identifier"})
    comment_types = frozenset({"line_comment", "block_comment"})


class GoClassifier(TreeSitterClassifier):
    kinds = {
        "function_declaration": DeclarationKind.FUNCTION,
        "method_declaration": DeclarationKind.FUNCTION,
        "type_declaration": DeclarationKind.TYPE_ALIAS,
        "var_declaration": DeclarationKind.VARIABLE,
        "const_declaration": DeclarationKind.VARIABLE,
    }
    identifier_types = frozenset({"identifier", "type_identifier", "field_identifier", "package_identifier"})

    def classify(self, node: Node) -> DeclarationKind | None:
        kind = self.kinds.get(node.type)
        if kind is not DeclarationKind.TYPE_ALIAS:
            return kind
        spec = next((child for child in node.named_children if child.type == "type_spec"), None)
        if spec is None:
            return DeclarationKind.TYPE_ALIAS
        spec_type = spec.child_by_field_name("type")
        if spec_type is not None and spec_type.type == "struct_type":
            return DeclarationKind.CLASS
        if spec_type is not None and spec_type.type == "interface_type":
            return DeclarationKind.INTERFACE
        return DeclarationKind.TYPE_ALIAS

    def declared_identifiers(self, node: Node, kind: DeclarationKind) -> list[str]:
        if node.type in {"function_declaration", "method_declaration"}:
            return super().declared_identifiers(node, kind)
        spec_types = {"type_spec", "type_alias", "var_spec", "const_spec"}
        names: list[str] = []
        stack = list(reversed(node.named_children))
        while stack:
            child = stack.pop()
            if child.type in spec_types:
                names.extend(node_text(name) for name in child.children_by_field_name("name"))
            else:
                stack.extend(reversed(child.named_children))
        return names


_TYPESCRIPT = TypeScriptClassifier()

_CLASSIFIERS: dict[str, DeclarationClassifier] = {
    "go": GoClassifier(),
    "java": JavaClassifier(),
    "javascript": _TYPESCRIPT,
    "python": PythonClassifier(),
    "tsx": _TYPESCRIPT,
    "typescript": _TYPESCRIPT,
}


def get_classifier(language: str) -> DeclarationClassifier:
    try:
        return _CLASSIFIERS[language]
    except KeyError:
        raise ValueError(f"No declaration classifier for language '{language}'") from None
