"""Live list reconciliation: snapshot plus change events."""
import pytest

from atelier.services.realtime import (
    Deleted,
    Inserted,
    LiveList,
    Updated,
    event_from_payload,
    order_snapshot,
    reduce_rows,
)


def row(row_id, created_at, status="Order Confirmed"):
    return {"id": row_id, "created_at": created_at, "status": status, "dress_type": f"Dress {row_id}"}


INITIAL = [row("a", "2026-10-01T10:00:00"), row("b", "2026-10-01T11:00:00")]
EVENTS = [
    Inserted(row("c", "2026-10-01T12:00:00")),
    Updated({"id": "a", "status": "Cutting"}),
    Inserted(row("d", "2026-10-01T13:00:00")),
    Deleted("b"),
    Updated({"id": "c", "status": "Stitching"}),
]


def backend_state(committed):
    """Rows in the backend after the first `committed` events."""
    rows = {r["id"]: dict(r) for r in INITIAL}
    for event in EVENTS[:committed]:
        if isinstance(event, Inserted):
            rows[event.id] = dict(event.row)
        elif isinstance(event, Updated):
            rows[event.id].update(event.row)
        else:
            rows.pop(event.id, None)
    return list(rows.values())


def ids(rows):
    return [r["id"] for r in rows]


@pytest.mark.parametrize("committed", range(len(EVENTS) + 1))
@pytest.mark.parametrize("delivered_early", range(len(EVENTS) + 1))
def test_every_row_appears_once_however_events_interleave_with_snapshot(committed, delivered_early):
    # The snapshot reflects `committed` events; `delivered_early` events reach
    # the list before the snapshot does and are replayed over it.
    live = LiveList("orders")
    for event in EVENTS[:delivered_early]:
        live.apply(event)
    live.load_snapshot(backend_state(committed))
    for event in EVENTS[delivered_early:]:
        live.apply(event)

    assert ids(live.rows) == ["d", "c", "a"]
    assert len(set(ids(live.rows))) == len(live.rows)
    assert live.get("a")["status"] == "Cutting"
    assert live.get("c")["status"] == "Stitching"


def test_insert_goes_first_and_update_keeps_position():
    rows = order_snapshot(INITIAL)
    assert ids(rows) == ["b", "a"]

    rows = reduce_rows(rows, Inserted(row("c", "2026-10-01T12:00:00")))
    rows = reduce_rows(rows, Updated({"id": "a", "status": "Trial"}))

    assert ids(rows) == ["c", "b", "a"]
    assert rows[2]["status"] == "Trial"
    assert rows[2]["dress_type"] == "Dress a"


def test_duplicate_insert_is_ignored():
    rows = order_snapshot(INITIAL)
    again = reduce_rows(rows, Inserted(row("a", "2026-10-01T10:00:00")))
    assert again is rows


@pytest.mark.parametrize("event", [Updated({"id": "zzz", "status": "Ready"}), Deleted("zzz")])
def test_unknown_id_is_a_no_op(event):
    rows = order_snapshot(INITIAL)
    result = reduce_rows(rows, event)

    assert result is rows
    assert ids(result) == ["b", "a"]


def test_reduce_never_mutates_its_input():
    rows = order_snapshot(INITIAL)
    before = [dict(r) for r in rows]

    reduce_rows(rows, Updated({"id": "a", "status": "Ready"}))
    reduce_rows(rows, Deleted("b"))

    assert rows == before


def test_snapshot_deduplicates_and_sorts_newest_first():
    rows = order_snapshot(INITIAL + [row("a", "2026-10-01T10:00:00"), row("c", "2026-10-02T09:00:00")])
    assert ids(rows) == ["c", "b", "a"]


def test_listener_sees_visible_changes_only():
    seen = []
    live = LiveList("orders", on_change=lambda lst, event: seen.append(event))
    live.apply(Inserted(row("x", "2026-10-03T00:00:00")))
    assert seen == []

    live.load_snapshot(INITIAL)
    live.apply(Updated({"id": "nope", "status": "Ready"}))
    live.apply(Deleted("a"))

    assert seen[0] is None
    assert isinstance(seen[1], Deleted)
    assert len(seen) == 2
    assert ids(live.rows) == ["x", "b"]


def test_closed_list_drops_late_snapshot_and_events():
    live = LiveList("orders")
    live.close()
    live.load_snapshot(INITIAL)

    assert live.apply(Inserted(row("c", "2026-10-01T12:00:00"))) is False
    assert live.rows == []
    assert live.loaded is False


class TestPayloadDecoding:

    def test_channel_shape(self):
        event = event_from_payload({"data": {"type": "UPDATE", "record": {"id": "a", "status": "Ready"}}})
        assert event == Updated({"id": "a", "status": "Ready"})

    def test_client_shape(self):
        event = event_from_payload({"eventType": "DELETE", "new": {}, "old": {"id": "a"}})
        assert isinstance(event, Deleted)
        assert event.id == "a"

    @pytest.mark.parametrize("payload", [
        {"data": {"type": "TRUNCATE"}},
        {"eventType": "INSERT", "new": {}},
        "not a dict",
    ])
    def test_unusable_payloads_are_dropped(self, payload):
        assert event_from_payload(payload) is None
