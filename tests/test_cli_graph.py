"""Tests for the 'graph' CLI command group."""

from __future__ import annotations

import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

from cli.commands.graph import graph_app
from cli.context import CliContext, load_context, save_context

runner = CliRunner()

BASE = "https://api.example.com"
ROOT = f"{BASE}/brum-proxy/graph"

GRAPH = {
    "nodes": [
        {"id": "Account.Status", "label": "Status", "type": "Field", "risk": "Critical"},
        {"id": "StatusHandler", "label": "StatusHandler", "type": "Apex", "risk": "Safe"},
    ],
    "edges": [{"source": "Account.Status", "target": "StatusHandler", "relationType": "REFERENCES"}],
}


@pytest.fixture
def configured(tmp_path, monkeypatch):
    """Point settings at the mocked API and an isolated CLI directory."""
    monkeypatch.setattr("depgraph.config.settings.api_base_url", BASE)
    monkeypatch.setattr("depgraph.config.settings.api_path_prefix", "/brum-proxy/graph")
    monkeypatch.setattr("depgraph.config.settings.api_token", "tok")
    monkeypatch.setattr("depgraph.config.settings.token_command", None)
    monkeypatch.setattr("depgraph.config.settings.context_id", None)
    monkeypatch.setattr("depgraph.config.settings.layout_direction", "LR")
    monkeypatch.setattr("depgraph.config.settings.cli_config_dir", tmp_path / ".depgraph_cli")
    return tmp_path


def test_trace_prints_tree(configured):
    with respx.mock:
        respx.post(f"{ROOT}/impact").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(graph_app, ["trace", "Account.Status"])

    assert result.exit_code == 0, result.stdout
    assert "Status [Field]" in result.stdout
    assert "[REFERENCES]" in result.stdout
    assert "2 nodes · 1 connections" in result.stdout


def test_trace_sends_saved_context(configured):
    save_context(CliContext(active_context_id="brain-42"))
    with respx.mock:
        route = respx.post(f"{ROOT}/impact").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(graph_app, ["trace", "Account.Status", "--format", "list"])

    assert result.exit_code == 0, result.stdout
    assert json.loads(route.calls.last.request.content)["curriculumId"] == "brain-42"


def test_json_output_with_hover(configured):
    with respx.mock:
        respx.post(f"{ROOT}/impact").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(
            graph_app, ["trace", "Account.Status", "--format", "json", "--hover", "StatusHandler"]
        )

    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout[result.stdout.index("{"):])
    assert payload["hoveredNodeId"] == "StatusHandler"
    assert all(n["isHighlighted"] for n in payload["nodes"])


def test_ask_prints_generated_query_and_remembers_it(configured):
    body = {**GRAPH, "cypher": "MATCH (f:Field) RETURN f"}
    with respx.mock:
        respx.post(f"{ROOT}/ask").mock(return_value=httpx.Response(200, json=body))
        result = runner.invoke(graph_app, ["ask", "Which fields are critical?"])

    assert result.exit_code == 0, result.stdout
    assert "Generated query:" in result.stdout
    assert "MATCH (f:Field) RETURN f" in result.stdout
    assert load_context().last_query == "MATCH (f:Field) RETURN f"


def test_run_defaults_to_last_query(configured):
    save_context(CliContext(last_query="MATCH (n:Apex) RETURN n"))
    with respx.mock:
        route = respx.post(f"{ROOT}/raw").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(graph_app, ["run"])

    assert result.exit_code == 0, result.stdout
    assert json.loads(route.calls.last.request.content)["query"] == "MATCH (n:Apex) RETURN n"


def test_run_with_edit_uses_edited_text(configured, monkeypatch):
    def fake_editor(path):
        path.write_text("MATCH (n:Flow) RETURN n", encoding="utf-8")
        return 0

    monkeypatch.setattr("cli.editor._open_editor", fake_editor)
    with respx.mock:
        route = respx.post(f"{ROOT}/raw").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(graph_app, ["run", "MATCH (n) RETURN n", "--edit"])

    assert result.exit_code == 0, result.stdout
    assert json.loads(route.calls.last.request.content)["query"] == "MATCH (n:Flow) RETURN n"


def test_run_without_any_query_fails(configured):
    result = runner.invoke(graph_app, ["run"])
    assert result.exit_code == 1
    assert "input is empty" in result.stdout


def test_server_error_exits_non_zero(configured):
    with respx.mock:
        respx.post(f"{ROOT}/impact").mock(
            return_value=httpx.Response(404, json={"message": "Unknown field"})
        )
        result = runner.invoke(graph_app, ["trace", "Nope.Field"])

    assert result.exit_code == 1
    assert "Unknown field" in result.stdout


def test_missing_base_url(configured, monkeypatch):
    monkeypatch.setattr("depgraph.config.settings.api_base_url", None)
    result = runner.invoke(graph_app, ["trace", "Account.Status"])
    assert result.exit_code == 1
    assert "DEPGRAPH_API_BASE_URL" in result.stdout


def test_missing_token(configured, monkeypatch):
    monkeypatch.setattr("depgraph.config.settings.api_token", None)
    result = runner.invoke(graph_app, ["trace", "Account.Status"])
    assert result.exit_code == 1
    assert "no credential" in result.stdout


def test_failing_token_command(configured, monkeypatch):
    monkeypatch.setattr("depgraph.config.settings.token_command", "depgraph-no-such-token-helper")
    with respx.mock(assert_all_called=False) as respx_mock:
        route = respx_mock.post(f"{ROOT}/impact").mock(return_value=httpx.Response(200, json=GRAPH))
        result = runner.invoke(graph_app, ["trace", "Account.Status"])
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "no credential" in result.stdout
    assert not route.called


def test_bad_format_rejected(configured):
    result = runner.invoke(graph_app, ["trace", "Account.Status", "--format", "svg"])
    assert result.exit_code != 0
