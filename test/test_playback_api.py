from bson import ObjectId


def test_latest_is_empty_list_without_records(client):
    resp = client.get("/playback")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_playback_defaults(client, create_track):
    track = create_track()
    resp = client.post("/playback", json={"trackId": track["id"], "position": 12})
    assert resp.status_code == 201
    record = resp.json()
    assert record["track_id"] == track["id"]
    assert record["position"] == 12
    assert record["is_playing"] is True
    assert record["started_at"] == record["updated_at"]
    assert record["track"]["title"] == track["title"]


def test_latest_returns_most_recent_record(client, create_track):
    first = create_track(title="First")
    second = create_track(title="Second")
    older = client.post("/playback", json={"trackId": first["id"]}).json()
    newer = client.post("/playback", json={"trackId": second["id"], "isPlaying": False}).json()

    latest = client.get("/playback").json()
    assert len(latest) == 1
    assert latest[0]["id"] == newer["id"]
    assert latest[0]["is_playing"] is False

    # touching the older record makes it the most recent one
    client.put(f"/playback/{older['id']}", json={"position": 90})
    latest = client.get("/playback").json()
    assert latest[0]["id"] == older["id"]
    assert latest[0]["position"] == 90


def test_create_playback_validation(client, create_track):
    assert client.post("/playback", json={"trackId": "bad"}).status_code == 400
    assert client.post("/playback", json={"trackId": str(ObjectId())}).status_code == 400
    track = create_track()
    assert client.post("/playback", json={"trackId": track["id"], "position": "later"}).status_code == 400
    assert client.post("/playback", json={"position": 3}).status_code == 400


def test_owner_required_for_playback_when_enabled(make_client):
    strict = make_client(REQUIRE_OWNER=True)
    track_id = strict.post("/tracks", json={"title": "Song"}).json()["id"]
    assert strict.post("/playback", json={"trackId": track_id}).status_code == 400
    assert strict.post("/playback", json={"trackId": track_id, "owner": "alice"}).status_code == 201


def test_update_playback(client, create_track):
    track = create_track()
    record = client.post("/playback", json={"trackId": track["id"]}).json()

    resp = client.put(f"/playback/{record['id']}", json={"isPlaying": False, "position": 30, "owner": "bob"})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["is_playing"] is False
    assert updated["position"] == 30
    assert updated["owner"] == "bob"
    assert updated["started_at"] == record["started_at"]
    assert updated["updated_at"] > record["updated_at"]

    assert client.put(f"/playback/{record['id']}", json={"position": None}).status_code == 400
    assert client.put(f"/playback/{ObjectId()}", json={"position": 1}).status_code == 404


def test_delete_playback(client, create_track):
    track = create_track()
    record = client.post("/playback", json={"trackId": track["id"]}).json()
    resp = client.delete(f"/playback/{record['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Playback record deleted"}
    assert client.get("/playback").json() == []
    assert client.delete(f"/playback/{record['id']}").status_code == 404


def test_playback_of_deleted_track_has_null_track(client, create_track):
    track = create_track()
    client.post("/playback", json={"trackId": track["id"]})
    client.delete(f"/tracks/{track['id']}")
    latest = client.get("/playback").json()
    assert latest[0]["track_id"] == track["id"]
    assert latest[0]["track"] is None
