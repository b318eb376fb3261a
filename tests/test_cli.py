import json
import logging

import httpx
import pytest

from hydrant import cli
from hydrant.config import settings
from hydrant.search.backends import HttpSolrTransport
from hydrant.utils.logging import JsonFormatter, configure_json_logging


@pytest.fixture
def levels(monkeypatch):
    seen = []
    monkeypatch.setattr(cli, "configure_json_logging", seen.append)
    return seen


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _transport(handler) -> HttpSolrTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpSolrTransport("http://solr.test/solr/core", client=client)


def test_prints_decoded_response(levels, capsys):
    seen = {}
    payload = {
        "response": {"docs": [{"id": "Post 1"}, {"id": "Post 2"}], "numFound": 5},
        "facet_counts": {"facet_fields": {"blog_id_i": ["3", 2, None, 1]}},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json=payload)

    argv = ["--type", "Post", "--facet", "blog_id:integer", "--page", "1", "--per-page", "2", "--log-level", "DEBUG"]
    assert cli.main(argv, transport=_transport(handler)) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["total"] == 5
    assert out["results"] == [["Post", "1"], ["Post", "2"]]
    assert out["facets"]["blog_id"] == [
        {"value": 3, "count": 2, "error": None},
        {"value": None, "count": 1, "error": None},
    ]
    assert seen["params"].get_list("facet.field") == ["blog_id_i"]
    assert seen["params"]["fq"] == "type:(Post)"
    assert seen["params"]["rows"] == "2"
    assert levels == ["DEBUG"]


def test_log_level_defaults_to_settings(levels, capsys):
    transport = _transport(lambda request: httpx.Response(200, json={"response": {"docs": [], "numFound": 0}}))
    assert cli.main([], transport=transport) == 0
    assert levels == [settings.LOG_LEVEL]
    assert json.loads(capsys.readouterr().out)["results"] == []


def test_transport_failure_exits_nonzero(levels, capsys):
    transport = _transport(lambda request: httpx.Response(503, text="down"))
    assert cli.main(["--q", "title:x"], transport=transport) == 1
    assert "HTTP 503" in capsys.readouterr().err


def test_missing_url_exits_with_usage_error(levels, capsys):
    assert cli.main(["--url", ""]) == 2
    assert "SOLR_URL" in capsys.readouterr().err


def test_unknown_facet_type_is_rejected(levels):
    with pytest.raises(SystemExit):
        cli.main(["--facet", "blog_id:decimal"])


def test_dynamic_facet_argument():
    request = cli._facet_request("custom_string/test:string")
    assert (request.namespace, request.name, request.field_type.value) == ("custom_string", "test", "string")


def test_configure_json_logging_installs_formatter(restore_root_logging):
    configure_json_logging("debug")
    root = restore_root_logging
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING
