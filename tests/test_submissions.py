import hashlib

import pytest

from privacy.buffer import FixedRadiusSampler
from privacy.generalize import snap_fine
from privacy.models import Point, PrivacyMode, RedactionStrategy, Stop
from privacy.policy import PrivacyPolicy
from submissions import (
    InMemorySubmissionStore,
    InvalidPayload,
    SubmissionNotFound,
    SubmissionService,
    TravelMode,
    client_ip,
    hash_ip,
    parse_payload,
)


@pytest.fixture
def body():
    return {
        "route": [
            {"lat": 40.7128, "lng": -74.0060},
            {"lat": 40.7150, "lng": -74.0030},
            {"lat": 40.7200, "lng": -73.9990},
            {"lat": 40.7260, "lng": -73.9950},
        ],
        "metadata": {
            "title": "Morning commute",
            "description": None,
            "center": {"lat": 40.72, "lng": -74.0},
            "zoom": 14,
            "mode": "freehand",
            "privacy": "intersection",
        },
    }


@pytest.fixture
def store():
    return InMemorySubmissionStore()


@pytest.fixture
def service(store):
    return SubmissionService(
        store,
        policy=PrivacyPolicy(redaction_strategy=RedactionStrategy.DROP),
        sampler=FixedRadiusSampler(150.0),
        ip_hash_salt="pepper",
    )


# -------------------------
# Payload validation
# -------------------------

def test_parse_valid_payload(body):
    payload = parse_payload(body)

    assert len(payload.route) == 4
    assert payload.route[0] == Point(40.7128, -74.0060)
    assert payload.stops == []
    assert payload.metadata.mode == TravelMode.FREEHAND
    assert payload.metadata.privacy == PrivacyMode.INTERSECTION
    assert payload.metadata.zoom == 14


def test_privacy_defaults_to_policy_mode(body):
    del body["metadata"]["privacy"]

    assert parse_payload(body).metadata.privacy == PrivacyMode.INTERSECTION
    grid_policy = PrivacyPolicy(default_mode=PrivacyMode.GRID)
    assert parse_payload(body, grid_policy).metadata.privacy == PrivacyMode.GRID


def test_explicit_stops_are_parsed(body):
    body["stops"] = [{"lat": 40.7128, "lng": -74.0060}]

    assert parse_payload(body).stops == [Stop(Point(40.7128, -74.0060))]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda b: b.update(route=b["route"][:1]),
        lambda b: b.update(route="not a list"),
        lambda b: b["route"].__setitem__(0, {"lat": 91.0, "lng": 0.0}),
        lambda b: b["route"].__setitem__(0, {"lat": True, "lng": 0.0}),
        lambda b: b["route"].__setitem__(0, {"lat": "40.7", "lng": 0.0}),
        lambda b: b.update(stops={"lat": 1.0, "lng": 1.0}),
        lambda b: b["metadata"].update(mode="walking"),
        lambda b: b["metadata"].update(privacy="fuzzy"),
        lambda b: b["metadata"].update(zoom=23),
        lambda b: b["metadata"].update(zoom=True),
        lambda b: b["metadata"].update(title="x" * 301),
        lambda b: b["metadata"].update(center={"lat": "a", "lng": 1}),
        lambda b: b.pop("metadata"),
    ],
)
def test_invalid_payloads_are_rejected(body, mutate):
    mutate(body)

    with pytest.raises(InvalidPayload) as excinfo:
        parse_payload(body)
    assert excinfo.value.errors


def test_whole_number_zoom_is_an_integer(body):
    body["metadata"]["zoom"] = 14.0

    assert parse_payload(body).metadata.zoom == 14


def test_fractional_zoom_is_rejected(body):
    body["metadata"]["zoom"] = 14.5

    with pytest.raises(InvalidPayload) as excinfo:
        parse_payload(body)
    assert any(error.startswith("metadata.zoom") for error in excinfo.value.errors)


def test_integer_coordinates_are_numbers(body):
    body["route"][0] = {"lat": 40, "lng": -74}

    assert parse_payload(body).route[0] == Point(40.0, -74.0)


def test_stop_labels_are_kept(body):
    body["stops"] = [
        {"lat": 40.7128, "lng": -74.0060, "label": "origin"},
        {"lat": 40.7260, "lng": -73.9950, "label": "destination", "isDerived": False},
    ]

    stops = parse_payload(body).stops

    assert [stop.label for stop in stops] == ["origin", "destination"]
    assert not any(stop.is_derived for stop in stops)


def test_route_cap_comes_from_policy(body):
    policy = PrivacyPolicy(max_route_points=3)

    with pytest.raises(InvalidPayload):
        parse_payload(body, policy)


def test_non_object_body_is_rejected():
    with pytest.raises(InvalidPayload):
        parse_payload([1, 2, 3])


# -------------------------
# IP helpers
# -------------------------

def test_hash_ip():
    expected = hashlib.sha256(b"203.0.113.9|pepper").hexdigest()

    assert hash_ip("203.0.113.9", "pepper") == expected
    assert hash_ip("203.0.113.9", "salt") != expected
    assert hash_ip("", "pepper") is None


def test_client_ip_prefers_first_forwarded_hop():
    assert client_ip("203.0.113.9, 10.0.0.1", "10.0.0.2") == "203.0.113.9"
    assert client_ip(None, "10.0.0.2") == "10.0.0.2"
    assert client_ip(" , ", None) == ""


# -------------------------
# Service
# -------------------------

def test_submit_stores_only_redacted_coordinates(service, store, body):
    payload = parse_payload(body)

    submission = service.submit(payload, ip="203.0.113.9", user_agent="pytest")
    record = store.get(submission.id)

    # 1. endpoints were inside the buffer and are gone from the stored route
    stored_route = [Point.from_dict(p) for p in record["route"]]
    assert payload.route[0] not in stored_route
    assert payload.route[-1] not in stored_route
    # 2. stops are persisted snapped, never at full precision
    stored_stops = [Point(s["lat"], s["lng"]) for s in record["metadata"]["stops"]]
    assert stored_stops == [snap_fine(payload.route[0]), snap_fine(payload.route[-1])]
    assert all(s["isDerived"] for s in record["metadata"]["stops"])
    # 3. metadata and request info
    assert record["metadata"]["privacyMode"] == "intersection"
    assert record["metadata"]["title"] == "Morning commute"
    assert record["ipHash"] == hash_ip("203.0.113.9", "pepper")
    assert record["userAgent"] == "pytest"


def test_exact_submission_is_stored_verbatim(service, store, body):
    body["metadata"]["privacy"] = "exact"
    payload = parse_payload(body)

    submission = service.submit(payload)
    record = store.get(submission.id)

    assert record["route"] == body["route"]
    assert record["metadata"]["stops"] == []
    assert record["ipHash"] is None


def test_no_salt_means_no_ip_hash(monkeypatch, store, body):
    monkeypatch.delenv("IP_HASH_SALT", raising=False)
    service = SubmissionService(store, sampler=FixedRadiusSampler(150.0))

    submission = service.submit(parse_payload(body), ip="203.0.113.9")

    assert store.get(submission.id)["ipHash"] is None


def test_get_route(service, body):
    submission = service.submit(parse_payload(body))

    view = service.get_route(submission.id)

    assert view["id"] == submission.id
    assert view["stops"] == view["metadata"]["stops"]
    assert len(view["stops"]) == 2
    assert view["submittedAt"] == submission.submitted_at.isoformat()


def test_get_route_unknown_id(service):
    with pytest.raises(SubmissionNotFound):
        service.get_route("missing")


def test_get_route_infers_snapped_stops_for_legacy_records(service, store):
    store.save({
        "id": "legacy",
        "route": [{"lat": 40.71234, "lng": -74.00567}, {"lat": 40.72345, "lng": -74.01234}],
        "metadata": {"mode": "freehand", "privacyMode": "intersection"},
    })

    view = service.get_route("legacy")

    assert [(s["lat"], s["lng"]) for s in view["stops"]] == [(40.712, -74.006), (40.723, -74.012)]
    assert view["submittedAt"] is None


def test_driving_route_stops_keep_labels_through_submit(service, store, body):
    """
    Stops built for a driving route (origin / stop-N / destination) survive
    serialization, validation and redaction with their labels.
    """
    driving_stops = [
        Stop(Point(40.7128, -74.0060), label="origin"),
        Stop(Point(40.7200, -73.9990), label="stop-1"),
        Stop(Point(40.7260, -73.9950), label="destination"),
    ]
    body["stops"] = [stop.as_dict() for stop in driving_stops]

    submission = service.submit(parse_payload(body))
    stored = store.get(submission.id)["metadata"]["stops"]

    assert [s["label"] for s in stored] == ["origin", "stop-1", "destination"]
    assert [Point(s["lat"], s["lng"]) for s in stored] == [snap_fine(stop.point) for stop in driving_stops]


def test_route_view_does_not_alias_stored_record(service, store, body):
    submission = service.submit(parse_payload(body))

    view = service.get_route(submission.id)
    view["metadata"]["stops"].clear()
    view["route"].clear()

    # 1. the stored record is untouched
    record = store.get(submission.id)
    assert len(record["metadata"]["stops"]) == 2
    assert len(record["route"]) == 2
    # 2. neither is a dict handed to save()
    record["metadata"]["title"] = "changed"
    assert store.get(submission.id)["metadata"]["title"] == "Morning commute"


def test_store_copies_on_save():
    store = InMemorySubmissionStore()
    record = {"id": "a", "route": [{"lat": 1.0, "lng": 2.0}], "metadata": {}}

    store.save(record)
    record["route"].append({"lat": 3.0, "lng": 4.0})

    assert store.get("a")["route"] == [{"lat": 1.0, "lng": 2.0}]


def test_ip_hash_salt_is_read_from_environment(monkeypatch, store, body):
    monkeypatch.setenv("IP_HASH_SALT", "env-salt")
    service = SubmissionService(store, sampler=FixedRadiusSampler(150.0))

    submission = service.submit(parse_payload(body), ip="203.0.113.9")

    assert store.get(submission.id)["ipHash"] == hash_ip("203.0.113.9", "env-salt")
