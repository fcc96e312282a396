from __future__ import annotations

import re
from typing import Dict

from markupgen.core.generation.code_model import CodeAttribute, CompileUnit
from markupgen.core.settings import parse_bool

from .catalog import EXCLUDE_FROM_CODE_COVERAGE, DirectiveFn


def _class_name(model: CompileUnit, value: str) -> None:
    v = (value or "").strip()
    if v:
        model.type.name = v


def _namespace(model: CompileUnit, value: str) -> None:
    v = (value or "").strip()
    if v:
        model.namespace.name = v


def _imports(model: CompileUnit, value: str) -> None:
    model.imports.update(p.strip() for p in re.split(r"[;,]", value or ""))


def _exclude_from_code_coverage(model: CompileUnit, value: str) -> None:
    if parse_bool(value):
        model.type.add_attribute(CodeAttribute(EXCLUDE_FROM_CODE_COVERAGE))


def _type_visibility(model: CompileUnit, value: str) -> None:
    v = (value or "").strip().lower()
    if v not in ("public", "internal"):
        raise ValueError(f"TypeVisibility must be 'public' or 'internal', got {value!r}")
    model.type.visibility = v  # type: ignore[assignment]


def _disable_line_pragmas(model: CompileUnit, value: str) -> None:
    if parse_bool(value):
        model.type.entry_method.line_pragmas = False


def _trim_leading_underscores(model: CompileUnit, value: str) -> None:
    if parse_bool(value):
        model.type.name = model.type.name.lstrip("_") or model.type.name


STANDARD_DIRECTIVES: Dict[str, DirectiveFn] = {
    "ClassName": _class_name,
    "Namespace": _namespace,
    "Imports": _imports,
    "ExcludeFromCodeCoverage": _exclude_from_code_coverage,
    "TypeVisibility": _type_visibility,
    "DisableLinePragmas": _disable_line_pragmas,
    "TrimLeadingUnderscores": _trim_leading_underscores,
}
