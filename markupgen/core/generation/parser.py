from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from markupgen.core.settings import DEFAULT_BASE_TYPE, DEFAULT_IMPORTS

from .code_model import (
    CompileUnit,
    Constructor,
    EntryMethod,
    NamespaceDeclaration,
    OrderedImportSet,
    Statement,
    StatementKind,
    TypeDeclaration,
)
from .models import Diagnostic


UNTERMINATED_CODE_BLOCK = 101
UNTERMINATED_EXPRESSION = 102
UNTERMINATED_COMMENT = 103
UNEXPECTED_TRANSITION = 104


@dataclass
class ParseResults:
    model: CompileUnit
    diagnostics: List[Diagnostic] = field(default_factory=list)


class TemplateParser(Protocol):
    def parse(
        self,
        text: str,
        *,
        class_name: str,
        namespace: str,
        source_file: str,
        line_pragmas: bool = True,
    ) -> ParseResults:
        ...


class _Scanner:
    """Single forward pass over template text, splitting markup from code."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.statements: List[Statement] = []
        self.diagnostics: List[Diagnostic] = []
        self._pending: Optional[Tuple[int, List[str]]] = None

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------
    def _location(self, pos: int) -> Tuple[int, int]:
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def _diagnose(self, code: int, message: str, pos: int) -> None:
        line, column = self._location(pos)
        self.diagnostics.append(Diagnostic(code=code, message=message, line=line, column=column))

    # ------------------------------------------------------------------
    # Statement emission
    # ------------------------------------------------------------------
    def _literal(self, start: int, chunk: str) -> None:
        if not chunk:
            return
        if self._pending is None:
            self._pending = (start, [chunk])
        else:
            self._pending[1].append(chunk)

    def _flush(self) -> None:
        if self._pending is None:
            return
        start, chunks = self._pending
        self._pending = None
        self._emit("literal", "".join(chunks), start)

    def _emit(self, kind: StatementKind, text: str, pos: int) -> None:
        line, column = self._location(pos)
        self.statements.append(Statement(kind=kind, text=text, line=line, column=column))

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------
    def _skip_string(self, j: int) -> int:
        text, n = self.text, len(self.text)
        quote = text[j]
        k = j + 1
        while k < n:
            c = text[k]
            if c == "\\":
                k += 2
                continue
            if c == quote:
                return k + 1
            if c == "\n":
                # unterminated literal ends with its line
                return k
            k += 1
        return n

    def _match(self, open_pos: int, opener: str, closer: str) -> Optional[int]:
        text, n = self.text, len(self.text)
        depth = 0
        j = open_pos
        while j < n:
            ch = text[j]
            if ch in "\"'":
                j = self._skip_string(j)
                continue
            if ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    return j
            j += 1
        return None

    def _identifier_end(self, k: int) -> int:
        text, n = self.text, len(self.text)
        while k < n and (text[k].isalnum() or text[k] == "_"):
            k += 1
        return k

    def _implicit_end(self, start: int) -> int:
        text, n = self.text, len(self.text)
        j = self._identifier_end(start)
        while j < n:
            ch = text[j]
            if ch == "." and j + 1 < n and (text[j + 1].isalpha() or text[j + 1] == "_"):
                j = self._identifier_end(j + 1)
            elif ch in "([":
                end = self._match(j, ch, ")" if ch == "(" else "]")
                if end is None:
                    break
                j = end + 1
            else:
                break
        return j

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        text, n = self.text, len(self.text)
        while self.pos < n:
            i = text.find("@", self.pos)
            if i < 0:
                self._literal(self.pos, text[self.pos:])
                break
            self._literal(self.pos, text[self.pos:i])
            self._transition(i)
        self._flush()

    def _transition(self, i: int) -> None:
        text, n = self.text, len(self.text)
        prev = text[i - 1] if i > 0 else ""
        nxt = text[i + 1] if i + 1 < n else ""

        if prev.isalnum():
            # name@example.com
            self._literal(i, "@")
            self.pos = i + 1
        elif nxt == "@":
            self._literal(i, "@")
            self.pos = i + 2
        elif nxt == "*":
            end = text.find("*@", i + 2)
            if end < 0:
                self._diagnose(UNTERMINATED_COMMENT, "The comment block is missing a closing '*@'.", i)
                self.pos = n
            else:
                self.pos = end + 2
        elif nxt == "{":
            end = self._match(i + 1, "{", "}")
            if end is None:
                self._diagnose(
                    UNTERMINATED_CODE_BLOCK,
                    "The code block is missing a closing '}' character.",
                    i,
                )
                body, self.pos = text[i + 2:], n
            else:
                body, self.pos = text[i + 2:end], end + 1
            self._flush()
            if body.strip():
                self._emit("code", body.strip(), i + 2)
        elif nxt == "(":
            end = self._match(i + 1, "(", ")")
            if end is None:
                self._diagnose(
                    UNTERMINATED_EXPRESSION,
                    "The explicit expression is missing a closing ')' character.",
                    i,
                )
                body, self.pos = text[i + 2:], n
            else:
                body, self.pos = text[i + 2:end], end + 1
            self._flush()
            if body.strip():
                self._emit("expression", body.strip(), i + 2)
        elif nxt.isalpha() or nxt == "_":
            end = self._implicit_end(i + 1)
            self._flush()
            self._emit("expression", text[i + 1:end], i + 1)
            self.pos = end
        else:
            found = repr(nxt) if nxt else "end of file"
            self._diagnose(
                UNEXPECTED_TRANSITION,
                f"Unexpected {found} after '@'. Use '@@' for a literal '@'.",
                i,
            )
            self._literal(i, "@")
            self.pos = i + 1


class MarkupTemplateParser:
    """
    Default parser for markup with ``@`` code transitions.

    Builds the default code model (host namespace, imports, base type, one
    parameterless constructor and the ``Execute`` entry method) and reports
    recoverable syntax problems as diagnostics instead of raising.
    """

    def __init__(
        self,
        *,
        default_imports: Iterable[str] = DEFAULT_IMPORTS,
        default_base_type: str = DEFAULT_BASE_TYPE,
    ):
        self.default_imports = tuple(default_imports)
        self.default_base_type = default_base_type

    def parse(
        self,
        text: str,
        *,
        class_name: str,
        namespace: str,
        source_file: str,
        line_pragmas: bool = True,
    ) -> ParseResults:
        scanner = _Scanner(text)
        scanner.run()

        declaration = TypeDeclaration(
            name=class_name,
            base_type=self.default_base_type,
            constructors=[Constructor()],
            entry_method=EntryMethod(statements=scanner.statements, line_pragmas=line_pragmas),
        )
        model = CompileUnit(
            namespace=NamespaceDeclaration(
                name=namespace,
                type=declaration,
                imports=OrderedImportSet(self.default_imports),
            ),
            source_file=source_file,
        )
        return ParseResults(model=model, diagnostics=scanner.diagnostics)
