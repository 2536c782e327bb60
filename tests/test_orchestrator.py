"""
End-to-end tests of the stats pipeline against a fake Avito.
"""

import pytest

from avito_proxy.errors import AuthError, InvalidRequestError, UpstreamItemsError

from fakes import FakeSession, make_response


ITEMS_PAYLOAD = {
    "result": [{
        "itemId": 42,
        "stats": [
            {"date": "2024-01-01", "uniqViews": 10, "uniqContacts": 2},
            {"date": "2024-01-02", "uniqViews": 5, "uniqContacts": 1},
        ],
    }]
}
CALLS_PAYLOAD = {"result": [{"date": "2024-01-01", "calls": 3}]}


def test_week_grouping_merges_calls(build_orchestrator):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD), calls=make_response(200, CALLS_PAYLOAD))
    result = build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07", "week")

    assert result == {
        "itemId": "42",
        "series": [{"date": "2024-01-01", "views": 15, "clicks": 0, "contacts": 3, "calls": 3, "sales": 0}],
    }


def test_day_grouping_keeps_call_only_dates(build_orchestrator):
    calls = {"result": [{"date": "2024-01-01", "calls": 3}, {"date": "2024-01-03", "calls": 1}]}
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD), calls=make_response(200, calls))
    series = build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07")["series"]

    assert [b["date"] for b in series] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert series[2] == {"date": "2024-01-03", "views": 0, "clicks": 0, "contacts": 0, "calls": 1, "sales": 0}


def test_upstream_calls_sequential_items_first(build_orchestrator):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD), calls=make_response(200, CALLS_PAYLOAD))
    build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07")

    paths = [url.replace("https://api.avito.ru", "") for url in session.urls()]
    assert paths == [
        "/token",
        "/stats/v1/accounts/100500/items",
        "/core/v1/accounts/100500/calls/stats/",
    ]


def test_call_stats_failure_falls_back_to_items(build_orchestrator):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD), calls=make_response(500, text="oops"))
    series = build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07", "week")["series"]

    assert series == [{"date": "2024-01-01", "views": 15, "clicks": 0, "contacts": 3, "calls": 0, "sales": 0}]


def test_call_stats_network_failure_falls_back(build_orchestrator, network_error):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD), calls=network_error)
    series = build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07")["series"]

    assert [b["calls"] for b in series] == [0, 0]


def test_unknown_grouping_means_day(build_orchestrator):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD))
    series = build_orchestrator(session).build_stats("42", None, None, "fortnight")["series"]

    assert [b["date"] for b in series] == ["2024-01-01", "2024-01-02"]


def test_token_reused_across_requests(build_orchestrator):
    session = FakeSession(items=make_response(200, ITEMS_PAYLOAD))
    orchestrator = build_orchestrator(session)
    orchestrator.build_stats("42", None, None)
    orchestrator.build_stats("42", None, None)

    assert session.count("/token") == 1


def test_auth_failure_aborts(build_orchestrator):
    session = FakeSession(token=make_response(401, text="bad credentials"))
    with pytest.raises(AuthError):
        build_orchestrator(session).build_stats("42", None, None)


def test_item_stats_failure_aborts(build_orchestrator):
    session = FakeSession(items=make_response(500, text="boom"))
    with pytest.raises(UpstreamItemsError):
        build_orchestrator(session).build_stats("42", None, None)
    assert session.count("/calls/stats/") == 0


def test_invalid_item_id_aborts_before_network(build_orchestrator):
    session = FakeSession()
    with pytest.raises(InvalidRequestError):
        build_orchestrator(session).build_stats("not-a-number", None, None)
    assert session.calls == []


def test_one_token_exchange_per_request_with_short_ttl(build_orchestrator):
    short_lived = make_response(200, {"access_token": "tok-1", "expires_in": 30})
    session = FakeSession(token=short_lived, items=make_response(200, ITEMS_PAYLOAD), calls=make_response(200, CALLS_PAYLOAD))
    build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07")

    assert session.count("/token") == 1
    for url, kwargs in session.calls[1:]:
        assert kwargs["headers"]["Authorization"] == "Bearer tok-1"


def test_call_stats_reuse_token_when_a_refresh_would_fail(build_orchestrator):
    tokens = [
        make_response(200, {"access_token": "tok-1", "expires_in": 30}),
        make_response(401, text="revoked"),
    ]
    session = FakeSession(token=tokens, items=make_response(200, ITEMS_PAYLOAD), calls=make_response(200, CALLS_PAYLOAD))
    series = build_orchestrator(session).build_stats("42", "2024-01-01", "2024-01-07", "week")["series"]

    assert series == [{"date": "2024-01-01", "views": 15, "clicks": 0, "contacts": 3, "calls": 3, "sales": 0}]
