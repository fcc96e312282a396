from __future__ import annotations

from fastapi import APIRouter, HTTPException

from markupgen.core.generation.languages import get_language_profile, list_languages
from markupgen.core.generation.service import get_profile_registry


router = APIRouter(prefix="/api/v1", tags=["profiles"])


def _profile_out(spec) -> dict:
    return {
        "name": spec.name,
        "description": spec.description,
        "transformers": [t.name for t in spec.transformers],
    }


@router.get("/profiles")
def list_profiles():
    reg = get_profile_registry()
    return {"profiles": [_profile_out(reg.get(name)) for name in reg.list_names()]}


@router.get("/profiles/{name}")
def get_profile(name: str):
    spec = get_profile_registry().get(name)
    if spec is None:
        raise HTTPException(status_code=404, detail="Transformer profile not found")
    return spec.model_dump()


@router.get("/languages")
def languages():
    out = []
    for name in list_languages():
        lp = get_language_profile(name)
        out.append(
            {
                "language": lp.language,
                "pre_block": lp.pre_block,
                "post_block": lp.post_block,
                "file_extension": lp.file_extension,
            }
        )
    return {"languages": out}
