"""
Atomic transformers.

Ordering notes, per entry, for anyone composing a profile:

- SetImports: with replace_existing=True it discards everything added
  before it, so place it ahead of DirectiveDispatch (the Imports directive
  adds names of its own).
- AddMarkerAttribute / AddGeneratedCodeAttribute: order-independent; both
  are idempotent.
- SetBaseType: last writer wins; place after DirectiveDispatch if the base
  type must not be directive-controlled.
- SetNamespace: initialize hook, so it always runs before parsing no matter
  where it sits; a later SetNamespace or a Namespace directive overrides it.
- DirectiveDispatch: after import-setting members.
- MakePartialAndStripDefaultConstructor: order-independent.
- ReplaceText / RewriteLinePragmas: text hooks fold in list order, so their
  relative order is observable when their edits overlap.
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Tuple

from markupgen import __version__
from markupgen.core.generation.code_model import CodeAttribute, CompileUnit
from markupgen.core.generation.models import TransformContext

from .base import Transformer

log = logging.getLogger("markupgen.transformers")

EXCLUDE_FROM_CODE_COVERAGE = "System.Diagnostics.CodeAnalysis.ExcludeFromCodeCoverage"
GENERATED_CODE = "System.CodeDom.Compiler.GeneratedCode"

DirectiveFn = Callable[[CompileUnit, str], None]


class SetImports(Transformer):
    name = "set_imports"

    def __init__(self, imports: Iterable[str], replace_existing: bool = False):
        self.imports: Tuple[str, ...] = tuple(imports)
        self.replace_existing = bool(replace_existing)

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        if self.replace_existing:
            model.imports.replace(self.imports)
        else:
            model.imports.update(self.imports)
        return model


class AddMarkerAttribute(Transformer):
    name = "add_marker_attribute"

    def __init__(self, attribute_name: str):
        if not (attribute_name or "").strip():
            raise ValueError("attribute_name must be non-empty")
        self.attribute_name = attribute_name.strip()

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        model.type.add_attribute(CodeAttribute(self.attribute_name))
        return model


class ExcludeFromCodeCoverage(AddMarkerAttribute):
    name = "exclude_from_code_coverage"

    def __init__(self) -> None:
        super().__init__(EXCLUDE_FROM_CODE_COVERAGE)


class AddGeneratedCodeAttribute(Transformer):
    name = "add_generated_code_attribute"

    def __init__(self, tool: str = "MarkupGen", version: str = __version__):
        self.tool = tool
        self.version = version

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        model.type.add_attribute(CodeAttribute(GENERATED_CODE, (self.tool, self.version)))
        return model


class SetBaseType(Transformer):
    name = "set_base_type"

    def __init__(self, base_type: str):
        self.base_type = base_type

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        model.type.base_type = self.base_type
        return model


class SetNamespace(Transformer):
    name = "set_namespace"

    def __init__(self, namespace: str):
        if not (namespace or "").strip():
            raise ValueError("namespace must be non-empty")
        self.namespace = namespace.strip()

    def initialize(self, context: TransformContext) -> None:
        context.namespace = self.namespace


class DirectiveDispatch(Transformer):
    """
    Applies a directive table to the model.

    Keys match case-insensitively. Directives are applied in the order the
    request lists them; directives without a table entry are ignored.
    """

    name = "directive_dispatch"

    def __init__(self, table: Mapping[str, DirectiveFn]):
        self._table = {k.lower(): fn for k, fn in table.items()}
        self._directives: Mapping[str, str] = MappingProxyType({})

    def initialize(self, context: TransformContext) -> None:
        self._directives = context.directives

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        for key, value in self._directives.items():
            fn = self._table.get(key.strip().lower())
            if fn is not None:
                fn(model, value)
        return model


class MakePartialAndStripDefaultConstructor(Transformer):
    name = "make_partial_and_strip_default_constructor"

    def mutate_model(self, model: CompileUnit) -> CompileUnit:
        decl = model.type
        decl.is_partial = True

        matches = [i for i, c in enumerate(decl.constructors) if c.is_default]
        if len(matches) > 1:
            log.warning(
                "type %s declares %d parameterless constructors; removing the first only",
                decl.name,
                len(matches),
            )
        if matches:
            del decl.constructors[matches[0]]
        return model


class ReplaceText(Transformer):
    name = "replace_text"

    def __init__(self, old: str, new: str):
        if not old:
            raise ValueError("old must be non-empty")
        self.old = old
        self.new = new

    def mutate_text(self, text: str) -> str:
        return text.replace(self.old, self.new)


_CS_PRAGMA = re.compile(r'^(#line \d+ ")([^"]*)(")', re.MULTILINE)
_VB_PRAGMA = re.compile(r'^(#ExternalSource\(")([^"]*)(",\d+\))', re.MULTILINE)


class RewriteLinePragmas(Transformer):
    """Makes pragma source paths relative to base_dir so output is machine-independent."""

    name = "rewrite_line_pragmas"

    def __init__(self, base_dir: str):
        self.base_dir = self._normalize(base_dir).rstrip("/")

    @staticmethod
    def _normalize(path: str) -> str:
        return (path or "").replace("\\", "/")

    def _relative(self, path: str) -> str:
        p = self._normalize(path)
        prefix = self.base_dir + "/"
        if self.base_dir and p.startswith(prefix):
            return p[len(prefix):]
        return p

    def mutate_text(self, text: str) -> str:
        def _sub(m: "re.Match[str]") -> str:
            return m.group(1) + self._relative(m.group(2)) + m.group(3)

        text = _CS_PRAGMA.sub(_sub, text)
        return _VB_PRAGMA.sub(_sub, text)
