from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from markupgen.core.generation.models import GenerationRequest
from markupgen.core.generation.service import run_generation
from markupgen.core.generation.source_reader import InlineSourceReader


router = APIRouter(prefix="/api/v1", tags=["generation"])


class GenerateRequest(BaseModel):
    template: str
    project_relative_path: str = Field(..., min_length=1)
    language: Optional[str] = None
    profile: str = "webpage"
    directives: Dict[str, str] = Field(default_factory=dict)


class DiagnosticOut(BaseModel):
    code: int
    message: str
    line: int
    column: int


class ProgressOut(BaseModel):
    completed: int
    total: int


class FailureOut(BaseModel):
    stage: str
    message: str


class GenerateResponse(BaseModel):
    ok: bool
    code: Optional[str] = None
    failure: Optional[FailureOut] = None
    diagnostics: List[DiagnosticOut] = Field(default_factory=list)
    progress: List[ProgressOut] = Field(default_factory=list)


@router.post("/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest):
    request = GenerationRequest(
        source_path=req.project_relative_path,
        project_relative_path=req.project_relative_path,
        language=req.language,
        directives=req.directives,
    )
    # Unknown profile / language propagate; SafeErrorMiddleware shapes them as 400.
    result, events = run_generation(
        request,
        profile=req.profile,
        source_reader=InlineSourceReader(req.template),
    )

    payload = events.to_payload()
    return GenerateResponse(
        ok=result.ok,
        code=result.code,
        failure=(
            FailureOut(stage=result.failure.stage, message=result.failure.message)
            if result.failure
            else None
        ),
        diagnostics=payload["diagnostics"],
        progress=payload["progress"],
    )
