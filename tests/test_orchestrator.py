"""
Generation pass: ordering of notifications, failure handling and the
observable properties callers rely on.
"""
from __future__ import annotations

from types import MappingProxyType

import pytest

from markupgen.core.generation.events import GenerationEvents
from markupgen.core.generation.languages import get_language_profile
from markupgen.core.generation.models import (
    FATAL_DIAGNOSTIC_CODE,
    GenerationRequest,
    GenerationState,
    UnknownLanguageError,
)
from markupgen.core.generation.orchestrator import GenerationOrchestrator
from markupgen.core.generation.source_reader import InlineSourceReader
from markupgen.core.settings import GeneratorSettings
from markupgen.core.transformers.base import Transformer
from markupgen.core.transformers.catalog import ReplaceText, SetNamespace
from markupgen.core.transformers.chain import TransformChain
from markupgen.core.transformers.profiles import TEMPLATE_IMPORTS, TransformerProfileRegistry

CSHARP = get_language_profile("csharp")


def _orchestrator(
    text="<h1>@Model.Title</h1>\n",
    *,
    transformer=None,
    directives=None,
    path="Views/Home/Index.cshtml",
    events=None,
    settings=None,
    **kwargs,
):
    events = events if events is not None else GenerationEvents()
    request = GenerationRequest(
        source_path=path,
        project_relative_path=path,
        directives=directives or {},
    )
    kwargs.setdefault("source_reader", InlineSourceReader(text))
    return GenerationOrchestrator(
        request,
        transformer=transformer if transformer is not None else TransformChain(),
        settings=settings or GeneratorSettings(),
        on_diagnostic=events.on_diagnostic,
        on_progress=events.on_progress,
        **kwargs,
    )


def _profile(name):
    return TransformerProfileRegistry().resolve(name)


def test_output_is_wrapped_in_language_blocks():
    result = _orchestrator(transformer=_profile("webpage")).generate()
    assert result.ok
    assert result.code.startswith(CSHARP.pre_block)
    assert result.code.endswith(CSHARP.post_block)


def test_default_type_name_comes_from_relative_path():
    o = _orchestrator()
    assert o.default_class_name == "Views_Home_Index_cshtml"
    assert "public class Views_Home_Index_cshtml :" in o.generate().code


def test_class_name_directive_overrides_default():
    result = _orchestrator(transformer=_profile("webpage"), directives={"ClassName": "Foo"}).generate()
    assert "public class Foo : " in result.code
    assert "Views_Home_Index_cshtml" not in result.code


def test_generate_is_deterministic():
    o = _orchestrator(transformer=_profile("template"), directives={"Imports": "A.B"})
    first = o.generate().code
    second = o.generate().code
    assert first == second
    other = _orchestrator(transformer=_profile("template"), directives={"Imports": "A.B"}).generate().code
    assert other == first


def test_template_profile_installs_exact_import_list():
    code = _orchestrator(transformer=_profile("template")).generate().code
    usings = [ln.strip()[len("using "):-1] for ln in code.splitlines() if ln.strip().startswith("using ")]
    assert usings == TEMPLATE_IMPORTS


def test_template_profile_shape():
    code = _orchestrator(transformer=_profile("template")).generate().code
    assert "public partial class Views_Home_Index_cshtml : MarkupGen.Templating.TemplateBase" in code
    assert "public Views_Home_Index_cshtml()" not in code
    assert '[System.CodeDom.Compiler.GeneratedCode("MarkupGen", ' in code


def test_three_parser_diagnostics_then_success():
    events = GenerationEvents()
    result = _orchestrator("@ a\n@ b\n  @ c", events=events).generate()

    assert result.ok
    assert [(d.line, d.column) for d in events.diagnostics] == [(1, 1), (2, 1), (3, 3)]
    assert [kind for kind, _ in events.timeline] == [
        "diagnostic",
        "diagnostic",
        "diagnostic",
        "progress",
        "progress",
    ]
    assert events.progress == [(50, 100), (100, 100)]


def test_unreadable_source_is_one_fatal_diagnostic_and_no_progress(tmp_path):
    events = GenerationEvents()
    o = _orchestrator(
        path=str(tmp_path / "missing.cshtml"),
        events=events,
        source_reader=None,
    )
    result = o.generate()

    assert not result.ok
    assert result.code is None
    assert result.failure.stage == "parse"
    assert "FileNotFoundError" in result.failure.message
    assert len(events.diagnostics) == 1
    d = events.diagnostics[0]
    assert (d.code, d.line, d.column) == (FATAL_DIAGNOSTIC_CODE, 1, 1)
    assert "Traceback" in d.message
    assert events.progress == []
    assert o.state == GenerationState.PARSE_FAILED


def test_reads_template_from_disk(template_file):
    result = _orchestrator(path=str(template_file), source_reader=None).generate()
    assert result.ok
    assert "Write(Model.Title);" in result.code


def test_swapping_text_transformers_changes_output():
    a = ReplaceText("WriteLiteral", "Emit")
    b = ReplaceText("Emit", "Out")
    forward = _orchestrator(transformer=TransformChain([a, b])).generate().code
    backward = _orchestrator(transformer=TransformChain([b, a])).generate().code
    assert forward != backward
    assert "Out(" in forward
    assert "Emit(" in backward


class _ExplodingRenderer:
    def render(self, model, profile):
        raise RuntimeError("renderer exploded")


def test_render_failure_reports_parser_diagnostics_then_fatal():
    events = GenerationEvents()
    o = _orchestrator("@ oops", events=events, renderer=_ExplodingRenderer())
    result = o.generate()

    assert not result.ok
    assert result.failure.stage == "render"
    assert [d.code for d in events.diagnostics] == [104, FATAL_DIAGNOSTIC_CODE]
    assert "renderer exploded" in events.diagnostics[-1].message
    assert events.progress == [(50, 100)]
    assert [kind for kind, _ in events.timeline] == ["diagnostic", "progress", "diagnostic"]
    assert o.state == GenerationState.RENDER_FAILED


def test_model_mutation_failure_is_fatal_render_stage():
    events = GenerationEvents()
    result = _orchestrator(
        transformer=_profile("webpage"),
        directives={"TypeVisibility": "private"},
        events=events,
    ).generate()
    assert result.failure.stage == "render"
    assert "ValueError" in result.failure.message
    assert [d.code for d in events.diagnostics] == [FATAL_DIAGNOSTIC_CODE]


def test_text_mutation_failure_is_fatal_after_completion_progress():
    class _BadText(Transformer):
        def mutate_text(self, text):
            raise KeyError("boom")

    events = GenerationEvents()
    o = _orchestrator(transformer=_BadText(), events=events)
    result = o.generate()
    assert not result.ok
    assert events.progress == [(50, 100), (100, 100)]
    assert [d.code for d in events.diagnostics] == [FATAL_DIAGNOSTIC_CODE]
    assert o.state == GenerationState.RENDER_FAILED


def test_successful_pass_ends_in_output_ready():
    o = _orchestrator()
    assert o.state == GenerationState.IDLE
    o.generate()
    assert o.state == GenerationState.OUTPUT_READY


def test_set_namespace_applies_before_parsing():
    code = _orchestrator(transformer=SetNamespace("MyApp.Views")).generate().code
    assert "namespace MyApp.Views\n" in code


def test_initialize_can_override_class_name():
    class _Rename(Transformer):
        def initialize(self, context):
            context.class_name = "Renamed"

    code = _orchestrator(transformer=_Rename()).generate().code
    assert "public class Renamed :" in code


def test_transformers_get_read_only_directives():
    seen = []

    class _Peek(Transformer):
        def initialize(self, context):
            seen.append(context.directives)

    o = _orchestrator(transformer=_Peek(), directives={"ClassName": "Foo"})
    o.generate()
    assert isinstance(seen[0], MappingProxyType)
    with pytest.raises(TypeError):
        seen[0]["ClassName"] = "Bar"
    assert o.request.directives == {"ClassName": "Foo"}


def test_settings_control_namespace_and_line_pragmas():
    settings = GeneratorSettings(default_namespace="Site", line_pragmas=False)
    code = _orchestrator(settings=settings).generate().code
    assert "namespace Site\n" in code
    assert "#line" not in code


def test_vb_language_is_derived_from_extension():
    o = _orchestrator(path="Views/Index.vbhtml")
    assert o.language == "vb"
    assert "Namespace ASP" in o.generate().code


def test_unknown_language_fails_at_construction():
    with pytest.raises(UnknownLanguageError):
        _orchestrator(path="notes.txt")


def test_generate_is_not_reentrant():
    holder = {}

    class _Reenter(Transformer):
        def initialize(self, context):
            holder["o"].generate()

    o = _orchestrator(transformer=_Reenter())
    holder["o"] = o
    with pytest.raises(RuntimeError):
        o.generate()


def test_notifications_are_optional():
    request = GenerationRequest(source_path="a.cshtml", project_relative_path="a.cshtml")
    o = GenerationOrchestrator(
        request,
        transformer=TransformChain(),
        source_reader=InlineSourceReader("@ x"),
        settings=GeneratorSettings(),
    )
    assert o.generate().ok


def test_utf8_template_without_bom_still_generates(tmp_path):
    p = tmp_path / "Thanks.cshtml"
    p.write_bytes("<p>Спасибо, Álvaro</p>\n".encode("utf-8"))
    events = GenerationEvents()
    result = _orchestrator(path=str(p), source_reader=None, events=events).generate()
    assert result.ok
    assert events.diagnostics == []
