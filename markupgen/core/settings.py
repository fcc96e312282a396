"""
Generator configuration.

Values come from the environment so the API process, the CLI and tests can
be configured without code changes:

    MARKUPGEN_ENV               dev | prod            (default: dev)
    MARKUPGEN_DEFAULT_NAMESPACE namespace for types   (default: ASP)
    MARKUPGEN_DEFAULT_ENCODING  codec used when a template has no BOM
                                (default: cp1252)
    MARKUPGEN_LINE_PRAGMAS      emit source line pragmas (default: 1)
    MARKUPGEN_PROFILES_FILE     optional YAML/JSON transformer profiles
    MARKUPGEN_LOG_LEVEL         logging level         (default: INFO)
"""
from __future__ import annotations

import os
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict


DEFAULT_IMPORTS: Tuple[str, ...] = (
    "System",
    "System.Collections.Generic",
    "System.IO",
    "System.Linq",
    "System.Net",
    "System.Text",
    "System.Web",
    "System.Web",
    "System.Web.Security",
    "System.Web.UI",
    "System.Web.WebPages",
    "System.Web.Helpers",
)

DEFAULT_BASE_TYPE = "System.Web.WebPages.WebPage"

_TRUE_VALUES = ("1", "true", "yes", "on")


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if not v:
        return default
    return v in _TRUE_VALUES


class GeneratorSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    env: str = "dev"
    default_namespace: str = "ASP"
    default_encoding: str = "cp1252"
    default_imports: Tuple[str, ...] = DEFAULT_IMPORTS
    default_base_type: str = DEFAULT_BASE_TYPE
    line_pragmas: bool = True
    profiles_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorSettings":
        e = os.environ if environ is None else environ

        def _get(key: str, default: str) -> str:
            return (e.get(key) or default).strip()

        return cls(
            env=_get("MARKUPGEN_ENV", "dev").lower(),
            default_namespace=_get("MARKUPGEN_DEFAULT_NAMESPACE", "ASP"),
            default_encoding=_get("MARKUPGEN_DEFAULT_ENCODING", "cp1252"),
            line_pragmas=parse_bool(e.get("MARKUPGEN_LINE_PRAGMAS"), default=True),
            profiles_file=(e.get("MARKUPGEN_PROFILES_FILE") or "").strip() or None,
            log_level=_get("MARKUPGEN_LOG_LEVEL", "INFO").upper(),
        )
