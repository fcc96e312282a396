from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from markupgen.api.main import app
from markupgen.core.generation.service import _registry_for
from markupgen.core.observability.metrics import reset_metrics
from markupgen.core.settings import GeneratorSettings


_ENV_KEYS = (
    "MARKUPGEN_ENV",
    "MARKUPGEN_DEFAULT_NAMESPACE",
    "MARKUPGEN_DEFAULT_ENCODING",
    "MARKUPGEN_LINE_PRAGMAS",
    "MARKUPGEN_PROFILES_FILE",
    "MARKUPGEN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # Generation reads settings from the environment; keep tests hermetic
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_metrics()
    _registry_for.cache_clear()
    yield
    _registry_for.cache_clear()


@pytest.fixture()
def settings() -> GeneratorSettings:
    return GeneratorSettings()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def template_file(tmp_path: Path) -> Path:
    """
    Provides Views/Home/Index.cshtml under a temporary project root.
    """
    path = tmp_path / "Views" / "Home" / "Index.cshtml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<h1>@Model.Title</h1>\n", encoding="utf-8")
    return path
