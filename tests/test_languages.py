import pytest

from markupgen.core.generation.languages import (
    get_language_profile,
    language_from_path,
    list_languages,
)
from markupgen.core.generation.models import UnknownLanguageError


def test_known_languages():
    assert list_languages() == ["csharp", "vb"]


def test_csharp_profile_wraps_with_warning_pragmas():
    p = get_language_profile("CSharp")
    assert p.pre_block == "#pragma warning disable 1591\n"
    assert p.post_block == "#pragma warning restore 1591\n"


def test_vb_profile_has_empty_blocks():
    p = get_language_profile("vb")
    assert (p.pre_block, p.post_block) == ("", "")


def test_unknown_language_raises():
    with pytest.raises(UnknownLanguageError):
        get_language_profile("cobol")


def test_language_from_extension():
    assert language_from_path("Views/Home/Index.cshtml") == "csharp"
    assert language_from_path("Views/Home/Index.VBHTML") == "vb"
    assert language_from_path("readme.txt") is None
