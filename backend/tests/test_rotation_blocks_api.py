from fastapi.testclient import TestClient

MONDAY = 1


def _blocks_url(hub_id, day=MONDAY):
    return f"/api/hubs/{hub_id}/days/{day}/rotation-blocks"


def test_create_block_from_times(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    vault = abc_hub["events"]["Vault"]

    response = client.post(
        _blocks_url(hub_id),
        json={"level": "C", "rotation_event_id": vault["id"], "start_time": "09:30:00", "end_time": "10:00:00"},
    )
    assert response.status_code == 201
    block = response.json()
    assert block["event_name"] == "Vault"
    assert block["color"] == "#ef4444"
    assert block["schedule_group"] == "A"
    assert block["time_display"] == "9:30 AM - 10:00 AM"
    assert block["coach_id"] is None

    listed = client.get(_blocks_url(hub_id)).json()
    assert [b["id"] for b in listed] == [block["id"]]
    assert client.get(_blocks_url(hub_id, day=2)).json() == []


def test_create_block_validation(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    vault = abc_hub["events"]["Vault"]

    backwards = client.post(
        _blocks_url(hub_id),
        json={"level": "A", "rotation_event_id": vault["id"], "start_time": "10:00:00", "end_time": "09:00:00"},
    )
    assert backwards.status_code == 422

    unknown_event = client.post(
        _blocks_url(hub_id),
        json={"level": "A", "rotation_event_id": 9999, "start_time": "09:00:00", "end_time": "09:30:00"},
    )
    assert unknown_event.status_code == 404


def test_select_on_combined_column_writes_primary_level(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    warmup = abc_hub["events"]["Warmup"]

    combined = client.post(
        f"/api/hubs/{hub_id}/days/{MONDAY}/grid-layout/actions", json={"action": "combine", "left": 0, "right": 1}
    )
    assert combined.status_code == 200

    response = client.post(
        f"{_blocks_url(hub_id)}/select",
        json={"group_index": 0, "start_row": 2, "end_row": 5, "rotation_event_id": warmup["id"]},
    )
    assert response.status_code == 201
    block = response.json()
    assert (block["level"], block["schedule_group"]) == ("A", "A")
    assert (block["start_time"], block["end_time"]) == ("09:10:00", "09:30:00")
    assert block["event_name"] == "Warmup"


def test_select_past_window_end_keeps_last_active_row(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    floor = abc_hub["events"]["Floor"]

    # column A ends at 10:00 (row 12); the drag runs on to row 15
    response = client.post(
        f"{_blocks_url(hub_id)}/select",
        json={"group_index": 0, "start_row": 10, "end_row": 15, "rotation_event_id": floor["id"]},
    )
    assert response.status_code == 201
    assert (response.json()["start_time"], response.json()["end_time"]) == ("09:50:00", "10:00:00")


def test_select_past_grid_edge_stops_at_last_row(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    floor = abc_hub["events"]["Floor"]

    # column C is active from row 6 to row 17; row 20 is past 10:30
    response = client.post(
        f"{_blocks_url(hub_id)}/select",
        json={"group_index": 2, "start_row": 6, "end_row": 20, "rotation_event_id": floor["id"]},
    )
    assert response.status_code == 201
    block = response.json()
    assert block["level"] == "C"
    assert (block["start_time"], block["end_time"]) == ("09:30:00", "10:30:00")


def test_select_upward_past_window_start(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    floor = abc_hub["events"]["Floor"]

    # C starts at row 6; dragging up to row 0 stops there
    response = client.post(
        f"{_blocks_url(hub_id)}/select",
        json={"group_index": 2, "start_row": 8, "end_row": 0, "rotation_event_id": floor["id"]},
    )
    assert (response.json()["start_time"], response.json()["end_time"]) == ("09:30:00", "09:45:00")


def test_select_rejects_inactive_start_and_bad_column(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    floor = abc_hub["events"]["Floor"]
    url = f"{_blocks_url(hub_id)}/select"

    inactive = client.post(url, json={"group_index": 2, "start_row": 0, "end_row": 3, "rotation_event_id": floor["id"]})
    assert inactive.status_code == 422

    missing = client.post(url, json={"group_index": 3, "start_row": 0, "end_row": 3, "rotation_event_id": floor["id"]})
    assert missing.status_code == 422

    no_practice = client.post(
        f"{_blocks_url(hub_id, day=0)}/select",
        json={"group_index": 0, "start_row": 0, "end_row": 0, "rotation_event_id": floor["id"]},
    )
    assert no_practice.status_code == 422

    assert client.get(_blocks_url(hub_id)).json() == []


def test_assign_coach_and_delete_block(abc_hub, client: TestClient):
    hub_id = abc_hub["hub"]["id"]
    beam = abc_hub["events"]["Beam"]
    coach = client.post(f"/api/hubs/{hub_id}/coaches", json={"full_name": "Jordan Reyes"}).json()

    block = client.post(
        _blocks_url(hub_id),
        json={"level": "B", "rotation_event_id": beam["id"], "start_time": "09:00:00", "end_time": "09:20:00"},
    ).json()

    assigned = client.put(f"/api/rotation-blocks/{block['id']}/coach", json={"coach_id": coach["id"]})
    assert assigned.status_code == 200
    assert assigned.json()["coach_name"] == "Jordan Reyes"

    cleared = client.put(f"/api/rotation-blocks/{block['id']}/coach", json={"coach_id": None})
    assert cleared.json()["coach_id"] is None

    assert client.put(f"/api/rotation-blocks/{block['id']}/coach", json={"coach_id": 9999}).status_code == 404

    assert client.delete(f"/api/rotation-blocks/{block['id']}").status_code == 200
    assert client.delete(f"/api/rotation-blocks/{block['id']}").status_code == 404
    assert client.put(f"/api/rotation-blocks/{block['id']}/coach", json={"coach_id": None}).status_code == 404
