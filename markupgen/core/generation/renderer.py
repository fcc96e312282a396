from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .code_model import CodeAttribute, CompileUnit, Constructor, Statement, TypeDeclaration
from .languages import LanguageProfile


TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

_BODY_INDENT = " " * 12


class CodeRenderer(Protocol):
    def render(self, model: CompileUnit, profile: LanguageProfile) -> str:
        ...


class _CSharpSyntax:
    _ESCAPES = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\0": "\\0",
        "\u0085": "\\u0085",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }

    def string(self, value: str) -> str:
        return '"' + "".join(self._ESCAPES.get(c, c) for c in value) + '"'

    def attribute(self, attribute: CodeAttribute) -> str:
        if attribute.is_marker:
            return attribute.name
        args = ", ".join(self.string(a) for a in attribute.arguments)
        return f"{attribute.name}({args})"

    def declaration(self, decl: TypeDeclaration) -> str:
        out = f"{decl.visibility} {'partial ' if decl.is_partial else ''}class {decl.name}"
        if decl.base_type:
            out += f" : {decl.base_type}"
        return out

    def pragma_open(self, source_file: str, line: int) -> str:
        return f'#line {line} "{source_file}"'

    def pragma_close(self) -> List[str]:
        return ["#line default", "#line hidden"]

    def statement(self, stmt: Statement) -> List[str]:
        if stmt.kind == "literal":
            return [f"WriteLiteral({self.string(stmt.text)});"]
        if stmt.kind == "expression":
            return [f"Write({stmt.text});"]
        return stmt.text.splitlines()


class _VisualBasicSyntax:
    _CHARS = {"\n": 10, "\r": 13, "\t": 9}

    def string(self, value: str) -> str:
        parts: List[str] = []
        for c in value:
            if c == '"':
                parts.append('""')
            elif c in self._CHARS:
                parts.append(f'" & Global.Microsoft.VisualBasic.ChrW({self._CHARS[c]}) & "')
            else:
                parts.append(c)
        return '"' + "".join(parts) + '"'

    def attribute(self, attribute: CodeAttribute) -> str:
        args = ", ".join(self.string(a) for a in attribute.arguments)
        return f"{attribute.name}({args})"

    def declaration(self, decl: TypeDeclaration) -> str:
        vis = "Public" if decl.visibility == "public" else "Friend"
        return f"{'Partial ' if decl.is_partial else ''}{vis} Class {decl.name}"

    def pragma_open(self, source_file: str, line: int) -> str:
        return f'#ExternalSource("{source_file}",{line})'

    def pragma_close(self) -> List[str]:
        return ["#End ExternalSource"]

    def statement(self, stmt: Statement) -> List[str]:
        if stmt.kind == "literal":
            return [f"WriteLiteral({self.string(stmt.text)})"]
        if stmt.kind == "expression":
            return [f"Write({stmt.text})"]
        return stmt.text.splitlines()


_SYNTAX = {
    "csharp": _CSharpSyntax(),
    "vb": _VisualBasicSyntax(),
}


class JinjaCodeRenderer:
    """
    Renders a code model through ``templates/<language>/compile_unit.*.j2``.

    Language-specific spelling (string escapes, attribute and declaration
    syntax, line pragmas) is computed here so the templates only lay out
    the compile unit. Output is the body only; the orchestrator wraps it
    in the language profile's pre/post blocks.
    """

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=()),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, model: CompileUnit, profile: LanguageProfile) -> str:
        syntax = _SYNTAX.get(profile.language)
        if syntax is None:
            raise ValueError(f"No renderer syntax for language {profile.language!r}")
        template = self._env.get_template(profile.template)
        return template.render(**self._context(model, syntax))

    def _context(self, model: CompileUnit, syntax: Any) -> Dict[str, Any]:
        decl = model.type
        return {
            "namespace": model.namespace.name,
            "imports": model.imports.to_list(),
            "attributes": [syntax.attribute(a) for a in decl.attributes],
            "declaration": syntax.declaration(decl),
            "type_name": decl.name,
            "base_type": decl.base_type,
            "constructors": [self._constructor(c) for c in decl.constructors],
            "entry_name": decl.entry_method.name,
            "body": self._body(model, syntax),
        }

    @staticmethod
    def _constructor(ctor: Constructor) -> Dict[str, Any]:
        return {"parameters": ", ".join(ctor.parameters), "body": list(ctor.body)}

    @staticmethod
    def _body(model: CompileUnit, syntax: Any) -> List[str]:
        method = model.type.entry_method
        lines: List[str] = []
        for stmt in method.statements:
            if method.line_pragmas:
                lines.append(syntax.pragma_open(model.source_file, stmt.line))
            lines.extend(_BODY_INDENT + ln if ln.strip() else "" for ln in syntax.statement(stmt))
            if method.line_pragmas:
                lines.extend(syntax.pragma_close())
        return lines
