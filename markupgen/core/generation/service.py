from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from markupgen.core.settings import GeneratorSettings
from markupgen.core.transformers.profiles import TransformerProfileRegistry

from .events import GenerationEvents
from .models import GenerationRequest, GenerationResult
from .orchestrator import GenerationOrchestrator
from .source_reader import SourceReader


@lru_cache(maxsize=8)
def _registry_for(profiles_file: Optional[str]) -> TransformerProfileRegistry:
    return TransformerProfileRegistry(Path(profiles_file) if profiles_file else None)


def get_profile_registry(settings: Optional[GeneratorSettings] = None) -> TransformerProfileRegistry:
    s = settings if settings is not None else GeneratorSettings.from_env()
    return _registry_for(s.profiles_file)


def run_generation(
    request: GenerationRequest,
    *,
    profile: str,
    settings: Optional[GeneratorSettings] = None,
    source_reader: Optional[SourceReader] = None,
) -> Tuple[GenerationResult, GenerationEvents]:
    """
    Resolve a profile and run one pass, recording its notifications.

    Raises UnknownProfileError / UnknownLanguageError for bad configuration;
    generation failures come back inside the result.
    """
    s = settings if settings is not None else GeneratorSettings.from_env()
    chain = get_profile_registry(s).resolve(profile)
    events = GenerationEvents()
    orchestrator = GenerationOrchestrator(
        request,
        transformer=chain,
        source_reader=source_reader,
        settings=s,
        on_diagnostic=events.on_diagnostic,
        on_progress=events.on_progress,
    )
    return orchestrator.generate(), events
