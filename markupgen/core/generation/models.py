from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


FATAL_DIAGNOSTIC_CODE = 4

FailureStage = Literal["parse", "render"]


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: str
    project_relative_path: str
    language: Optional[str] = None
    directives: Dict[str, str] = Field(default_factory=dict)

    def directive_view(self) -> Mapping[str, str]:
        """Read-only view handed to transformers."""
        return MappingProxyType(dict(self.directives))


class GenerationState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    PARSE_FAILED = "parse_failed"
    PARSED = "parsed"
    MUTATING = "mutating"
    RENDERING = "rendering"
    RENDER_FAILED = "render_failed"
    OUTPUT_READY = "output_ready"


@dataclass(frozen=True)
class Diagnostic:
    code: int
    message: str
    line: int
    column: int


@dataclass(frozen=True)
class GenerationFailure:
    stage: FailureStage
    message: str


@dataclass(frozen=True)
class GenerationResult:
    code: Optional[str] = None
    failure: Optional[GenerationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.code is not None


@dataclass
class TransformContext:
    """
    Per-pass settings visible to ``Transformer.initialize``.

    Initialize hooks may change namespace, class_name and line_pragmas;
    the orchestrator reads them back before the template is parsed.
    """

    directives: Mapping[str, str]
    language: str
    project_relative_path: str
    namespace: str
    class_name: str
    line_pragmas: bool = True


class UnknownLanguageError(ValueError):
    pass
