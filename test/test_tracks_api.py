from bson import ObjectId


def test_create_then_get_round_trip(client):
    body = {
        "title": "Bohemian Rhapsody",
        "artist": "Queen",
        "album": "A Night at the Opera",
        "duration": 354,
        "metadata": {"genre": "rock", "year": 1975},
    }
    created = client.post("/tracks", json=body)
    assert created.status_code == 201
    track = created.json()
    assert track["id"]
    assert track["created_at"]

    fetched = client.get(f"/tracks/{track['id']}")
    assert fetched.status_code == 200
    for key, value in body.items():
        assert fetched.json()[key] == value


def test_create_requires_title(client):
    resp = client.post("/tracks", json={"artist": "Queen"})
    assert resp.status_code == 400
    assert "title" in resp.json()["message"]


def test_create_rejects_blank_title_and_negative_duration(client):
    assert client.post("/tracks", json={"title": "   "}).status_code == 400
    assert client.post("/tracks", json={"title": "Song", "duration": -3}).status_code == 400


def test_list_tracks_oldest_first(client, create_track):
    create_track(title="Old")
    create_track(title="New")
    resp = client.get("/tracks")
    assert resp.status_code == 200
    assert [t["title"] for t in resp.json()] == ["Old", "New"]


def test_get_unknown_or_malformed_track_is_404(client):
    assert client.get(f"/tracks/{ObjectId()}").status_code == 404
    resp = client.get("/tracks/not-an-id")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Track not found"}


def test_partial_update(client, create_track):
    track = create_track(album="Old")
    resp = client.put(f"/tracks/{track['id']}", json={"album": "A Night at the Opera"})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["album"] == "A Night at the Opera"
    assert updated["title"] == track["title"]
    assert updated["created_at"] == track["created_at"]


def test_update_validation_and_not_found(client, create_track):
    track = create_track()
    assert client.put(f"/tracks/{track['id']}", json={"title": ""}).status_code == 400
    assert client.put(f"/tracks/{track['id']}", json={"title": None}).status_code == 400
    assert client.put(f"/tracks/{ObjectId()}", json={"album": "x"}).status_code == 404


def test_delete_track(client, create_track):
    track = create_track()
    resp = client.delete(f"/tracks/{track['id']}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Track deleted"
    assert client.get(f"/tracks/{track['id']}").status_code == 404
    assert client.delete(f"/tracks/{track['id']}").status_code == 404


def test_delete_track_unlinks_it_from_playlists(client, create_track, create_playlist):
    keep = create_track(title="Keep")
    gone = create_track(title="Gone")
    playlist = create_playlist()
    for track in (gone, keep):
        client.post(f"/playlists/{playlist['id']}/tracks", json={"trackId": track["id"]})

    resp = client.delete(f"/tracks/{gone['id']}")
    assert resp.json()["playlists_updated"] == 1

    entries = client.get(f"/playlists/{playlist['id']}/tracks").json()
    assert [(e["track_id"], e["order"]) for e in entries] == [(keep["id"], 1)]
