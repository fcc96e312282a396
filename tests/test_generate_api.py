def _body(**overrides):
    body = {
        "template": "<h1>@Model.Title</h1>\n",
        "project_relative_path": "Views/Home/Index.cshtml",
    }
    body.update(overrides)
    return body


def test_generate_returns_code(client):
    r = client.post("/api/v1/generate", json=_body())
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    assert data["failure"] is None
    assert data["code"].startswith("#pragma warning disable 1591\n")
    assert "public class Views_Home_Index_cshtml" in data["code"]
    assert data["diagnostics"] == []
    assert data["progress"] == [
        {"completed": 50, "total": 100},
        {"completed": 100, "total": 100},
    ]


def test_generate_applies_profile_and_directives(client):
    r = client.post(
        "/api/v1/generate",
        json=_body(profile="template", directives={"ClassName": "Welcome"}),
    )
    code = r.json()["code"]
    assert "public partial class Welcome : MarkupGen.Templating.TemplateBase" in code


def test_generate_reports_diagnostics(client):
    r = client.post("/api/v1/generate", json=_body(template="@ x @{ y"))
    data = r.json()
    assert data["ok"] is True
    assert [d["code"] for d in data["diagnostics"]] == [104, 101]
    assert data["diagnostics"][0]["line"] == 1
    assert data["diagnostics"][0]["column"] == 1


def test_generate_reports_failure(client):
    r = client.post(
        "/api/v1/generate",
        json=_body(directives={"TypeVisibility": "secret"}),
    )
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is False
    assert data["code"] is None
    assert data["failure"]["stage"] == "render"
    assert [d["code"] for d in data["diagnostics"]] == [4]


def test_generate_vb_by_language_field(client):
    r = client.post(
        "/api/v1/generate",
        json=_body(project_relative_path="Views/Index.page", language="vb"),
    )
    assert r.json()["ok"] is True
    assert "Namespace ASP" in r.json()["code"]


def test_generate_rejects_unknown_profile(client):
    r = client.post("/api/v1/generate", json=_body(profile="missing"), headers={"X-Request-Id": "rid-7"})
    assert r.status_code == 400
    assert r.json() == {
        "detail": "Unknown transformer profile: missing",
        "error": "unknown_profile",
        "request_id": "rid-7",
    }


def test_generate_rejects_unknown_language(client):
    r = client.post("/api/v1/generate", json=_body(project_relative_path="notes.txt"))
    assert r.status_code == 400
    assert r.json()["error"] == "unknown_language"
    assert "notes.txt" in r.json()["detail"]


def test_unhandled_error_is_a_500_without_traceback(client, monkeypatch):
    from markupgen.api.endpoints import generate as generate_ep

    def _boom(*args, **kwargs):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(generate_ep, "run_generation", _boom)
    r = client.post("/api/v1/generate", json=_body())
    assert r.status_code == 500
    assert r.json()["detail"] == "Internal Server Error"
    assert "secret internals" not in r.text


def test_list_profiles(client):
    r = client.get("/api/v1/profiles")
    assert r.status_code == 200
    names = [p["name"] for p in r.json()["profiles"]]
    assert names == ["template", "webpage"]
    webpage = r.json()["profiles"][1]
    assert webpage["transformers"] == ["directive_dispatch"]


def test_get_profile(client):
    assert client.get("/api/v1/profiles/template").json()["name"] == "template"
    assert client.get("/api/v1/profiles/none").status_code == 404


def test_languages(client):
    data = client.get("/api/v1/languages").json()
    assert [l["language"] for l in data["languages"]] == ["csharp", "vb"]


def test_health_and_request_id(client):
    r = client.get("/api/v1/health/live", headers={"X-Request-Id": "rid-1"})
    assert r.status_code == 200
    assert r.headers["X-Request-Id"] == "rid-1"
    assert r.json() == {"status": "alive"}


def test_only_versioned_routes_are_served(client):
    assert client.get("/health/live").status_code == 404
    assert client.get("/metrics/snapshot").status_code == 404


def test_metrics_snapshot_counts_generation(client):
    client.post("/api/v1/generate", json=_body())
    data = client.get("/api/v1/metrics/snapshot").json()
    assert data["generation_success"] == 1
    assert data["requests_total"] >= 1
    assert isinstance(data["requests"], dict)
