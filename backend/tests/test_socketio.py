import time


def _named(received, name):
    return [pkt["args"][0] for pkt in received if pkt["name"] == name]


def _wait_for(client, name, timeout=3.0):
    deadline = time.time() + timeout
    seen = []
    while time.time() < deadline:
        seen.extend(client.get_received())
        found = _named(seen, name)
        if found:
            return found
        time.sleep(0.05)
    return []


def _pair(make_sio_client):
    host = make_sio_client()
    guest = make_sio_client()
    code = host.emit("create_room", {"name": "Alice"}, callback=True)["code"]
    assert guest.emit("join_room", {"code": code, "name": "Bob"}, callback=True) == {"ok": True, "code": code}
    host.get_received()
    guest.get_received()
    return host, guest, code


def test_create_room_ack_and_state(make_sio_client):
    host = make_sio_client()
    ack = host.emit("create_room", {"name": "  Alice "}, callback=True)

    assert ack["ok"] is True
    assert len(ack["code"]) == 5
    states = _named(host.get_received(), "room_state")
    assert states[-1]["code"] == ack["code"]
    assert states[-1]["status"] == "lobby"
    assert states[-1]["players"][0]["name"] == "Alice"


def test_errors_are_acked_to_caller_only(make_sio_client):
    host, guest, _ = _pair(make_sio_client)

    ack = guest.emit("start_round", {}, callback=True)

    assert ack == {"ok": False, "error": "Only the host can start rounds"}
    assert _named(host.get_received(), "room_state") == []
    assert _named(guest.get_received(), "room_state") == []


def test_join_unknown_room(make_sio_client):
    client = make_sio_client()
    ack = client.emit("join_room", {"code": "ZZZZZ", "name": "Bob"}, callback=True)
    assert ack == {"ok": False, "error": "Room not found"}


def test_not_in_room(make_sio_client):
    client = make_sio_client()
    ack = client.emit("call_stop", {}, callback=True)
    assert ack == {"ok": False, "error": "Join a room first"}


def test_settings_validation(make_sio_client):
    host, guest, _ = _pair(make_sio_client)

    bad = host.emit("update_settings", {"categories": "Animal", "roundSeconds": 500}, callback=True)
    assert bad["ok"] is False
    assert "between 20 and 180" in bad["error"]

    good = host.emit("update_settings", {"categories": "Animal, Food", "roundSeconds": 30}, callback=True)
    assert good == {"ok": True}
    state = _named(guest.get_received(), "room_state")[-1]
    assert state["settings"] == {"categories": ["Animal", "Food"], "roundSeconds": 30}


def test_full_round_until_all_submitted(make_sio_client):
    host, guest, _ = _pair(make_sio_client)
    host.emit("update_settings", {"categories": ["Animal", "Food"], "roundSeconds": 60}, callback=True)

    assert host.emit("start_round", {}, callback=True) == {"ok": True}
    state = _named(guest.get_received(), "room_state")[-1]
    assert state["status"] == "round"
    letter = state["round"]["letter"]

    assert host.emit(
        "submit_answers", {"answers": {"Animal": letter + "ear", "Food": letter + "anana"}}, callback=True
    ) == {"ok": True}
    state = _named(guest.get_received(), "room_state")[-1]
    assert len(state["round"]["submittedPlayerIds"]) == 1
    assert letter + "ear" not in repr(state)

    guest.emit("submit_answers", {"answers": {"Animal": letter + "ear", "Food": letter + "iscuit"}}, callback=True)

    received = host.get_received()
    results = _named(received, "round_results")
    assert len(results) == 1
    assert results[0]["reason"] == "all_submitted"
    assert [(p["name"], p["roundPoints"]) for p in results[0]["players"]] == [("Alice", 15), ("Bob", 15)]
    assert _named(received, "room_state")[-1]["status"] == "results"


def test_stop_ends_round_after_grace(make_sio_client):
    host, guest, _ = _pair(make_sio_client)
    host.emit("start_round", {}, callback=True)

    assert guest.emit("call_stop", {}, callback=True) == {"ok": True}
    assert host.emit("call_stop", {}, callback=True) == {"ok": False, "error": "STOP already called"}

    results = _wait_for(host, "round_results")
    assert len(results) == 1
    assert results[0]["reason"] == "stop"


def test_disconnect_acts_as_leave(make_sio_client):
    host, guest, _ = _pair(make_sio_client)
    host.emit("start_round", {}, callback=True)
    host.emit("submit_answers", {"answers": {}}, callback=True)
    host.get_received()

    guest.disconnect()

    results = _wait_for(host, "round_results")
    assert results[0]["reason"] == "all_submitted"


def test_leave_room_transfers_host(make_sio_client):
    host, guest, _ = _pair(make_sio_client)

    assert host.emit("leave_room", {}, callback=True) == {"ok": True}

    state = _named(guest.get_received(), "room_state")[-1]
    assert state["hostId"] == state["me"]
    assert len(state["players"]) == 1
