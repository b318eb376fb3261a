import json
import logging

import httpx
import pytest

from hydrant.config import FieldType
from hydrant.errors import TransportError
from hydrant.search import FacetRequest, SearchQuery, SearchSession
from hydrant.search.backends import HttpSolrTransport
from hydrant.utils.logging import JsonFormatter, correlation_id, request_id_ctx


def _transport(handler) -> HttpSolrTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpSolrTransport("http://solr.test/solr/core/", client=client)


def test_transport_sends_params_and_decodes_json():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"response": {"docs": [], "numFound": 0}})

    body = _transport(handler).execute(SearchQuery(params={"q": "*:*", "fq": "type:Post"}))
    assert body == {"response": {"docs": [], "numFound": 0}}
    assert seen["url"] == "http://solr.test/solr/core/select"
    assert seen["params"] == {"q": "*:*", "fq": "type:Post", "wt": "json"}


def test_transport_raises_on_http_error():
    transport = _transport(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(TransportError) as info:
        transport.execute(SearchQuery())
    assert info.value.status_code == 500
    assert info.value.body == "boom"


def test_transport_raises_on_non_json():
    transport = _transport(lambda request: httpx.Response(200, text="<html/>"))
    with pytest.raises(TransportError):
        transport.execute(SearchQuery())


def test_session_end_to_end(make_posts, make_blogs, loader, count_selects):
    posts = make_posts(2)
    blogs = make_blogs(2)
    payload = {
        "response": {"docs": [{"id": f"Post {p.id}"} for p in reversed(posts)], "numFound": 2},
        "facet_counts": {"facet_fields": {"blog_id_i": [str(blogs[1].id), 5, str(blogs[0].id), 1]}},
    }
    transport = _transport(lambda request: httpx.Response(200, json=payload))
    session = SearchSession(transport, loader)
    query = SearchQuery(
        types=["Post"],
        page=1,
        per_page=10,
        facets=[FacetRequest("blog_id", FieldType.integer, reference="Blog")],
    )

    rs = session.search(query)

    assert count_selects("post") == 0
    assert rs.results == list(reversed(posts))
    assert rs.results.total_entries == 2
    assert [row.instance for row in rs.facet("blog_id").rows] == [blogs[1], blogs[0]]
    assert count_selects("post") == 1
    assert count_selects("blog") == 1


def test_json_formatter_includes_correlation_id():
    record = logging.LogRecord("search.session", logging.INFO, __file__, 1, "search.done", None, None)
    with correlation_id("abc123") as rid:
        assert rid == "abc123"
        payload = json.loads(JsonFormatter().format(record))
    assert payload["request_id"] == "abc123"
    assert payload["logger"] == "search.session"
    assert request_id_ctx.get() is None
