"""Tests for the Typer CLI."""

import json

import httpx
import respx
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()

_URL = "https://joes.example.com/"
_HTML = b"<title>Joe's Pizza | Best in Town</title><h1>Fresh dough daily</h1>"


def _mock_site() -> None:
    respx.get(_URL).mock(
        return_value=httpx.Response(200, headers={"content-type": "text/html"}, content=_HTML)
    )


def test_extract_prints_record_and_profile():
    with respx.mock:
        _mock_site()
        result = runner.invoke(app, ["extract", _URL])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["record"]["headings"] == ["Fresh dough daily"]
    assert data["profile"]["business_name"] == "Joe's Pizza"


def test_extract_rejects_private_url():
    result = runner.invoke(app, ["extract", "http://192.168.1.5/page"])
    assert result.exit_code == 1


def test_generate_mock():
    with respx.mock:
        _mock_site()
        result = runner.invoke(app, ["generate", _URL, "--mock"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["generator"] == "mock"
    assert len(data["ads"]) == 6


def test_generate_unsupported_content_type():
    with respx.mock:
        respx.get(_URL).mock(
            return_value=httpx.Response(200, headers={"content-type": "image/png"}, content=b"\x89PNG")
        )
        result = runner.invoke(app, ["generate", _URL, "--mock"])
    assert result.exit_code == 1
