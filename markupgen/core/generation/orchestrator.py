from __future__ import annotations

import logging
import traceback
from typing import Optional

from markupgen.core.observability.metrics import record_diagnostic, record_generation
from markupgen.core.settings import GeneratorSettings
from markupgen.core.transformers.base import Transformer

from .events import DiagnosticCallback, ProgressCallback
from .languages import LanguageProfile, get_language_profile, language_from_path
from .models import (
    FATAL_DIAGNOSTIC_CODE,
    FailureStage,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GenerationState,
    TransformContext,
    UnknownLanguageError,
)
from .naming import sanitize_class_name
from .parser import MarkupTemplateParser, TemplateParser
from .renderer import CodeRenderer, JinjaCodeRenderer
from .source_reader import FileSourceReader, SourceReader

log = logging.getLogger("markupgen.generation")

MIDPOINT = (50, 100)
COMPLETE = (100, 100)


class GenerationOrchestrator:
    """
    Drives one template through parse -> mutate model -> render -> mutate text.

    Collaborators (parser, renderer, source reader, transformer) are injected
    at construction; the language profile is resolved once, here, so an
    unknown language fails fast instead of mid-pass.

    Notifications:
      on_diagnostic(code, message, line, column)
        once per parser diagnostic, and exactly once with
        FATAL_DIAGNOSTIC_CODE when parsing or rendering raises.
      on_progress(completed, total)
        (50, 100) after parsing, (100, 100) after rendering.

    An instance is not reentrant; separate instances share no mutable state
    and may run on separate threads.
    """

    def __init__(
        self,
        request: GenerationRequest,
        *,
        transformer: Transformer,
        parser: Optional[TemplateParser] = None,
        renderer: Optional[CodeRenderer] = None,
        source_reader: Optional[SourceReader] = None,
        settings: Optional[GeneratorSettings] = None,
        on_diagnostic: Optional[DiagnosticCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.request = request
        self.settings = settings if settings is not None else GeneratorSettings.from_env()

        language = request.language or language_from_path(request.source_path)
        if not language:
            raise UnknownLanguageError(
                f"Cannot derive a target language from {request.source_path!r}; pass one explicitly"
            )
        self.language_profile: LanguageProfile = get_language_profile(language)

        self._transformer = transformer
        if parser is None:
            parser = MarkupTemplateParser(
                default_imports=self.settings.default_imports,
                default_base_type=self.settings.default_base_type,
            )
        self._parser = parser
        self._renderer = renderer if renderer is not None else JinjaCodeRenderer()
        if source_reader is None:
            source_reader = FileSourceReader(self.settings.default_encoding)
        self._source_reader = source_reader
        self._on_diagnostic = on_diagnostic
        self._on_progress = on_progress

        self._default_class_name: Optional[str] = None
        self._state = GenerationState.IDLE
        self._running = False

    @property
    def language(self) -> str:
        return self.language_profile.language

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def default_class_name(self) -> str:
        if self._default_class_name is None:
            self._default_class_name = sanitize_class_name(self.request.project_relative_path)
        return self._default_class_name

    def generate(self) -> GenerationResult:
        if self._running:
            raise RuntimeError("GenerationOrchestrator.generate() is not reentrant")
        self._running = True
        try:
            result = self._run()
        finally:
            self._running = False
        record_generation(self.language, result.ok)
        return result

    # ------------------------------------------------------------------
    # Pass
    # ------------------------------------------------------------------
    def _run(self) -> GenerationResult:
        self._state = GenerationState.IDLE
        source = self.request.source_path

        context = TransformContext(
            directives=self.request.directive_view(),
            language=self.language,
            project_relative_path=self.request.project_relative_path,
            namespace=self.settings.default_namespace,
            class_name=self.default_class_name,
            line_pragmas=self.settings.line_pragmas,
        )
        self._transformer.initialize(context)
        log.debug(
            "generate start source=%s language=%s namespace=%s class=%s",
            source,
            self.language,
            context.namespace,
            context.class_name,
        )

        self._state = GenerationState.PARSING
        try:
            text = self._source_reader.read(source)
            results = self._parser.parse(
                text,
                class_name=context.class_name,
                namespace=context.namespace,
                source_file=source,
                line_pragmas=context.line_pragmas,
            )
        except Exception as exc:
            return self._fail(GenerationState.PARSE_FAILED, "parse", exc)

        self._state = GenerationState.PARSED
        for d in results.diagnostics:
            record_diagnostic(fatal=False)
            self._diagnostic(d.code, d.message, d.line, d.column)
        self._progress(*MIDPOINT)

        try:
            self._state = GenerationState.MUTATING
            model = self._transformer.mutate_model(results.model)
            self._state = GenerationState.RENDERING
            body = self._renderer.render(model, self.language_profile)
        except Exception as exc:
            return self._fail(GenerationState.RENDER_FAILED, "render", exc)

        rendered = self.language_profile.pre_block + body + self.language_profile.post_block
        self._progress(*COMPLETE)

        try:
            code = self._transformer.mutate_text(rendered)
        except Exception as exc:
            return self._fail(GenerationState.RENDER_FAILED, "render", exc)

        self._state = GenerationState.OUTPUT_READY
        log.debug(
            "generate done source=%s diagnostics=%d chars=%d",
            source,
            len(results.diagnostics),
            len(code),
        )
        return GenerationResult(code=code)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _fail(self, state: GenerationState, stage: FailureStage, exc: Exception) -> GenerationResult:
        self._state = state
        description = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        log.error(
            "generation failed stage=%s source=%s\n%s",
            stage,
            self.request.source_path,
            description,
        )
        record_diagnostic(fatal=True)
        self._diagnostic(FATAL_DIAGNOSTIC_CODE, description, 1, 1)
        return GenerationResult(
            failure=GenerationFailure(stage=stage, message=f"{type(exc).__name__}: {exc}"),
        )

    def _diagnostic(self, code: int, message: str, line: int, column: int) -> None:
        if self._on_diagnostic is not None:
            self._on_diagnostic(code, message, line, column)

    def _progress(self, completed: int, total: int) -> None:
        if self._on_progress is not None:
            self._on_progress(completed, total)
