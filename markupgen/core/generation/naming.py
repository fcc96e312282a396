from __future__ import annotations


def _is_identifier_part(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def sanitize_class_name(relative_path: str) -> str:
    """
    Derive a type identifier from a project-relative path.

    "Views/Home/Index.cshtml" -> "Views_Home_Index_cshtml"
    "1Column.cshtml"          -> "_1Column_cshtml"
    """
    name = relative_path or ""
    if not name:
        return "_"
    if name[0].isdigit():
        name = "_" + name
    return "".join(ch if _is_identifier_part(ch) else "_" for ch in name)
