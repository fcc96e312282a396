"""
Transformer profiles: a profile key names an ordered transformer list.

Resolution order:
  1) Built-in profiles (always present)
  2) Optional profiles file (MARKUPGEN_PROFILES_FILE), YAML or JSON:

     profiles:
       mvc_view:
         description: Views compiled into MyApp.Views
         transformers:
           - name: set_namespace
             args: {namespace: MyApp.Views}
           - name: exclude_from_code_coverage
           - name: directive_dispatch

Transformer names resolve through TRANSFORMER_FACTORIES only; every file
profile is built once at load time so bad names or args surface as a
warning at startup, not in the middle of a generation pass.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .base import Transformer
from .catalog import (
    AddGeneratedCodeAttribute,
    AddMarkerAttribute,
    DirectiveDispatch,
    ExcludeFromCodeCoverage,
    MakePartialAndStripDefaultConstructor,
    ReplaceText,
    RewriteLinePragmas,
    SetBaseType,
    SetImports,
    SetNamespace,
)
from .chain import TransformChain
from .directives import STANDARD_DIRECTIVES

_log = logging.getLogger("markupgen.profiles")

TEMPLATE_IMPORTS = [
    "System",
    "System.Collections.Generic",
    "System.Linq",
    "System.Text",
]

TEMPLATE_BASE_TYPE = "MarkupGen.Templating.TemplateBase"


def _directive_dispatch() -> DirectiveDispatch:
    return DirectiveDispatch(STANDARD_DIRECTIVES)


TRANSFORMER_FACTORIES: Dict[str, Callable[..., Transformer]] = {
    SetImports.name: SetImports,
    AddMarkerAttribute.name: AddMarkerAttribute,
    ExcludeFromCodeCoverage.name: ExcludeFromCodeCoverage,
    AddGeneratedCodeAttribute.name: AddGeneratedCodeAttribute,
    SetBaseType.name: SetBaseType,
    SetNamespace.name: SetNamespace,
    DirectiveDispatch.name: _directive_dispatch,
    MakePartialAndStripDefaultConstructor.name: MakePartialAndStripDefaultConstructor,
    ReplaceText.name: ReplaceText,
    RewriteLinePragmas.name: RewriteLinePragmas,
}


class UnknownProfileError(KeyError):
    def __init__(self, name: str):
        super().__init__(f"Unknown transformer profile: {name}")
        self.name = name


class TransformerSpec(BaseModel):
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ProfileSpec(BaseModel):
    name: str
    description: Optional[str] = None
    transformers: List[TransformerSpec] = Field(default_factory=list)

    def build(self) -> TransformChain:
        members: List[Transformer] = []
        for t in self.transformers:
            factory = TRANSFORMER_FACTORIES.get(t.name)
            if factory is None:
                raise ValueError(f"Unknown transformer {t.name!r} in profile {self.name!r}")
            members.append(factory(**t.args))
        return TransformChain(members)


def builtin_profiles() -> List[ProfileSpec]:
    return [
        ProfileSpec(
            name="webpage",
            description="Web page: host defaults, customized by template directives",
            transformers=[TransformerSpec(name=DirectiveDispatch.name)],
        ),
        ProfileSpec(
            name="template",
            description="Standalone text template with a minimal import set",
            transformers=[
                TransformerSpec(
                    name=SetImports.name,
                    args={"imports": TEMPLATE_IMPORTS, "replace_existing": True},
                ),
                TransformerSpec(name=AddGeneratedCodeAttribute.name),
                TransformerSpec(name=DirectiveDispatch.name),
                TransformerSpec(name=SetBaseType.name, args={"base_type": TEMPLATE_BASE_TYPE}),
                TransformerSpec(name=MakePartialAndStripDefaultConstructor.name),
            ],
        ),
    ]


class TransformerProfileRegistry:
    def __init__(self, profiles_file: Optional[Path] = None):
        self.profiles_file = Path(profiles_file) if profiles_file else None
        self._profiles: Dict[str, ProfileSpec] = {}
        self._load_all()

    def _load_all(self) -> None:
        self._profiles = {p.name: p for p in builtin_profiles()}

        if self.profiles_file is None:
            return
        if not self.profiles_file.exists():
            _log.warning("Profiles file %s not found; using built-in profiles", self.profiles_file)
            return

        try:
            data = yaml.safe_load(self.profiles_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            _log.warning("Failed to read profiles file %s: %s", self.profiles_file, exc)
            return

        raw = data.get("profiles") if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            _log.warning("Profiles file %s must contain a 'profiles' mapping", self.profiles_file)
            return

        loaded = 0
        for name, body in raw.items():
            try:
                spec = ProfileSpec(name=str(name), **(body or {}))
                spec.build()
            except (ValidationError, ValueError, TypeError) as exc:
                _log.warning("Skipping profile %r from %s: %s", name, self.profiles_file, exc)
                continue
            self._profiles[spec.name] = spec
            loaded += 1

        _log.info("Loaded %d transformer profiles from %s", loaded, self.profiles_file)

    def list_names(self) -> List[str]:
        return sorted(self._profiles.keys())

    def get(self, name: str) -> Optional[ProfileSpec]:
        return self._profiles.get(name)

    def resolve(self, name: str) -> TransformChain:
        """Build a fresh chain for one generation pass."""
        spec = self.get(name)
        if spec is None:
            raise UnknownProfileError(name)
        return spec.build()
