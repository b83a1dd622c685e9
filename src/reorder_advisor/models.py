from enum import Enum

from pydantic import BaseModel, ConfigDict


class DeclarationKind(str, Enum):
    UNKNOWN = "unknown"
    CLASS = "class"
    FUNCTION = "function"
    INTERFACE = "interface"
    TYPE_ALIAS = "typeAlias"
    BLOCK = "block"
    VARIABLE = "variable"
    ENUM = "enum"


DEFAULT_DECLARATION_KIND_ORDER: tuple[DeclarationKind, ...] = (
    DeclarationKind.ENUM,
    DeclarationKind.TYPE_ALIAS,
    DeclarationKind.INTERFACE,
    DeclarationKind.FUNCTION,
    DeclarationKind.CLASS,
    DeclarationKind.BLOCK,
    DeclarationKind.VARIABLE,
    DeclarationKind.UNKNOWN,
)


class DeclarationNode(BaseModel):
    """One top-level declaration of a source file.

    ``start``/``end`` is the half-open character span used to partition the file;
    ``text_start`` is where the declaration's own text (leading comments included) begins.
    """

    model_config = ConfigDict(frozen=True)

    kind: DeclarationKind
    id: str
    start: int
    end: int
    text_start: int
    identifiers: tuple[str, ...] = ()
    child_identifiers: frozenset[str] = frozenset()

    @property
    def primary_identifier(self) -> str:
        return self.identifiers[0] if self.identifiers else self.id


class StringNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    top_level_node_index: int | None = None


class Coefficient(BaseModel):
    model_config = ConfigDict(frozen=True)

    dependency_coefficient: float
    similarity_coefficient: float
    kind_coefficient: float


class Solution(BaseModel):
    model_config = ConfigDict(frozen=True)

    old_index: int
    new_index: int
    nodes: tuple[DeclarationNode, ...]
    coefficient: Coefficient
    score: float
    reason: str | None = None

    @property
    def order(self) -> list[DeclarationNode]:
        """The declarations in the order this solution produces."""
        items = list(self.nodes)
        items.insert(self.new_index, items.pop(self.old_index))
        return items


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class TextRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position


class Reconstruction(BaseModel):
    text: str
    range: TextRange
    position: Position


class MoveFact(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_path: str
    language: str | None
    top_level_nodes: tuple[DeclarationNode, ...]
    string_nodes: tuple[StringNode, ...]
    separator: str
    selected_index: int
    character_difference: int
    fingerprint: str


class JobKind(str, Enum):
    MOVE_TOP_LEVEL_NODE = "moveTopLevelNode"
    REPAIR_CODE = "repairCode"


class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    kind: JobKind
    file_path: str
    title: str
    range: TextRange
    text: str
    position: Position
    fingerprint: str
    language: str | None = None
    declaration_id: str | None = None
    old_index: int | None = None
    new_index: int | None = None
    # cursor offset inside the moved declaration
    character_difference: int = 0
