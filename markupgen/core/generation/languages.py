from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, List, Optional

from .models import UnknownLanguageError


@dataclass(frozen=True)
class LanguageProfile:
    language: str
    pre_block: str
    post_block: str
    template: str
    file_extension: str


LANGUAGE_PROFILES: Dict[str, LanguageProfile] = {
    "csharp": LanguageProfile(
        language="csharp",
        # XML-doc warnings are meaningless for generated members.
        pre_block="#pragma warning disable 1591\n",
        post_block="#pragma warning restore 1591\n",
        template="csharp/compile_unit.cs.j2",
        file_extension=".cs",
    ),
    "vb": LanguageProfile(
        language="vb",
        pre_block="",
        post_block="",
        template="vb/compile_unit.vb.j2",
        file_extension=".vb",
    ),
}

TEMPLATE_EXTENSIONS: Dict[str, str] = {
    ".cshtml": "csharp",
    ".vbhtml": "vb",
}


def list_languages() -> List[str]:
    return sorted(LANGUAGE_PROFILES.keys())


def get_language_profile(language: str) -> LanguageProfile:
    key = (language or "").strip().lower()
    profile = LANGUAGE_PROFILES.get(key)
    if profile is None:
        raise UnknownLanguageError(f"Unknown target language: {language!r}")
    return profile


def language_from_path(path: str) -> Optional[str]:
    return TEMPLATE_EXTENSIONS.get(PurePath(path).suffix.lower())
