import asyncio
import json

from page_links import cli, crawler, mcp_server
from page_links.models import ExtractionResult


def test_urls_are_printed_one_per_line(monkeypatch, capsys):
    async def fake_render(url, config):
        return ["https://a.example.com/", "https://b.example.com/"]

    monkeypatch.setattr(cli, "extract_links_from_url", fake_render)
    cli.main(["https://example.com/"])

    assert capsys.readouterr().out.splitlines() == [
        "https://a.example.com/",
        "https://b.example.com/",
    ]


def test_json_output_with_domain_filter(monkeypatch, capsys):
    async def fake_static(url, config):
        return ["https://api.github.com/x", "https://example.com/z", "https://github.com/y"]

    monkeypatch.setattr(cli, "extract_links_from_static_url", fake_static)
    cli.main(["https://example.com/", "--static", "--domain", "github.com", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "https://example.com/"
    assert payload["links"] == ["https://api.github.com/x", "https://github.com/y"]
    assert payload["count"] == 2


def test_current_tab_is_the_default_source(monkeypatch, capsys):
    seen = []

    async def fake_current(config):
        seen.append(config.cdp_endpoint)
        return []

    monkeypatch.setattr(cli, "extract_links_from_current_tab", fake_current)
    cli.main(["--cdp-url", "http://127.0.0.1:9333", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert seen == ["http://127.0.0.1:9333"]
    assert payload["source"] == "current-tab"
    assert payload["links"] == []
    assert payload["average_seconds_per_link"] is None


def test_extraction_result_to_dict():
    result = ExtractionResult(source="https://example.com/", links=["a", "b"], elapsed_seconds=1.0)
    data = result.to_dict()
    assert data["count"] == 2
    assert data["average_seconds_per_link"] == 0.5


def test_mcp_tool_reports_links(monkeypatch):
    async def fake_render(url, config):
        return ["https://api.github.com/x", "https://example.com/z"]

    monkeypatch.setattr(mcp_server, "extract_links_from_url", fake_render)
    response = asyncio.run(mcp_server.extract_links("https://example.com/", domain="github.com"))
    assert response == {"success": True, "links": ["https://api.github.com/x"], "count": 1}


def test_mcp_tool_reports_errors(monkeypatch):
    async def broken(config):
        raise RuntimeError("boom")

    monkeypatch.setattr(mcp_server, "extract_links_from_current_tab", broken)
    response = asyncio.run(mcp_server.extract_current_tab_links())
    assert response == {"success": False, "error": "boom"}


def test_static_mode_survives_malformed_base_href(monkeypatch, capsys):
    def fake_fetch(url, config):
        return '<base href="http://[broken"><a href="/a">a</a>', "https://example.com/"

    monkeypatch.setattr(crawler, "fetch_static_html", fake_fetch)
    cli.main(["https://example.com/", "--static"])
    assert capsys.readouterr().out.splitlines() == ["https://example.com/a"]
