from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Literal, Optional, Tuple


StatementKind = Literal["literal", "expression", "code"]
Visibility = Literal["public", "internal"]


class OrderedImportSet:
    """
    Import names with set semantics and stable insertion order.

    Rendering iterates in first-seen order, so two passes over the same
    inputs always emit the same import block.
    """

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._items: Dict[str, None] = {}
        if names:
            self.update(names)

    def add(self, name: str) -> None:
        n = (name or "").strip()
        if n:
            self._items.setdefault(n, None)

    def update(self, names: Iterable[str]) -> None:
        for n in names:
            self.add(n)

    def replace(self, names: Iterable[str]) -> None:
        self._items.clear()
        self.update(names)

    def discard(self, name: str) -> None:
        self._items.pop((name or "").strip(), None)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __repr__(self) -> str:
        return f"OrderedImportSet({list(self._items)!r})"

    def to_list(self) -> List[str]:
        return list(self._items)


@dataclass(frozen=True)
class CodeAttribute:
    name: str
    arguments: Tuple[str, ...] = ()

    @property
    def is_marker(self) -> bool:
        return not self.arguments


@dataclass
class Constructor:
    parameters: Tuple[str, ...] = ()
    body: Tuple[str, ...] = ()

    @property
    def is_default(self) -> bool:
        return not self.parameters


@dataclass
class Statement:
    kind: StatementKind
    text: str
    line: int = 1
    column: int = 1


@dataclass
class EntryMethod:
    """The method the renderer writes template output into (line pragmas live here)."""

    name: str = "Execute"
    statements: List[Statement] = field(default_factory=list)
    line_pragmas: bool = True


@dataclass
class TypeDeclaration:
    name: str
    base_type: str
    visibility: Visibility = "public"
    is_partial: bool = False
    attributes: List[CodeAttribute] = field(default_factory=list)
    constructors: List[Constructor] = field(default_factory=list)
    entry_method: EntryMethod = field(default_factory=EntryMethod)

    def add_attribute(self, attribute: CodeAttribute) -> bool:
        """Append unless an equal attribute is already applied. Returns True if added."""
        if attribute in self.attributes:
            return False
        self.attributes.append(attribute)
        return True


@dataclass
class NamespaceDeclaration:
    name: str
    type: TypeDeclaration
    imports: OrderedImportSet = field(default_factory=OrderedImportSet)


@dataclass
class CompileUnit:
    """
    Root of the code model: one namespace holding one type.

    Created by the parse step and owned by the orchestrator until rendering;
    transformers mutate it in place and must not keep a reference to it.
    """

    namespace: NamespaceDeclaration
    source_file: str = ""

    @property
    def type(self) -> TypeDeclaration:
        return self.namespace.type

    @property
    def imports(self) -> OrderedImportSet:
        return self.namespace.imports
