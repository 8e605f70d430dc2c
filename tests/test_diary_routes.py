"""Integration tests for the /api/entries endpoints."""

from diary.models import DiaryEntry
from app.extensions import db


def _payload(**fields):
    return {
        "title": "After the meeting",
        "schema_mode": "Compliant Surrenderer",
        "need_met": "No",
        "fields": fields,
    }


def _audio(name):
    return {"is_audio": True, "content": name}


def _text(content):
    return {"is_audio": False, "content": content}


class TestCreateAndRead:
    def test_create_entry(self, client):
        response = client.post("/api/entries", json=_payload(situation=_text("Boss raised voice")))

        assert response.status_code == 201
        entry = response.get_json()["entry"]
        assert entry["title"] == "After the meeting"
        assert entry["schema_mode"] == "Compliant Surrenderer"
        assert entry["schema_mode_category"] == "Coping Modes"
        assert entry["need_met"] == "No"
        assert entry["fields"]["situation"] == _text("Boss raised voice")

    def test_blank_title_saved_as_untitled(self, client):
        response = client.post("/api/entries", json={"title": "", "schema_mode": "Angry"})
        assert response.get_json()["entry"]["title"] == "Untitled"

    def test_create_rejects_unknown_mode(self, client):
        response = client.post("/api/entries", json={"schema_mode": "not-a-real-mode"})
        assert response.status_code == 400
        assert "schema mode" in response.get_json()["error"]

    def test_create_rejects_non_json(self, client):
        response = client.post("/api/entries", data="nope", content_type="text/plain")
        assert response.status_code == 400

    def test_get_entry(self, client):
        created = client.post("/api/entries", json=_payload()).get_json()["entry"]

        response = client.get(f"/api/entries/{created['id']}")

        assert response.status_code == 200
        assert response.get_json()["id"] == created["id"]

    def test_get_missing_entry(self, client):
        response = client.get("/api/entries/does-not-exist")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Diary entry not found"

    def test_list_newest_first(self, client):
        first = client.post("/api/entries", json={"title": "first"}).get_json()["entry"]
        second = client.post("/api/entries", json={"title": "second"}).get_json()["entry"]
        db.session.get(DiaryEntry, first["id"]).date = db.session.get(DiaryEntry, second["id"]).date.replace(year=2000)
        db.session.commit()

        data = client.get("/api/entries").get_json()

        assert data["total"] == 2
        assert [entry["title"] for entry in data["entries"]] == ["second", "first"]

    def test_list_pagination(self, client):
        for i in range(3):
            client.post("/api/entries", json={"title": f"entry {i}"})

        data = client.get("/api/entries?per_page=2&page=2").get_json()

        assert data["pages"] == 2
        assert data["current_page"] == 2
        assert len(data["entries"]) == 1

    def test_stored_unknown_mode_still_listed(self, client):
        db.session.add(DiaryEntry(schema_mode="Renamed Mode", title="legacy"))
        db.session.commit()

        entry = client.get("/api/entries").get_json()["entries"][0]

        assert entry["schema_mode"] == "Renamed Mode"
        assert entry["resolved_schema_mode"] == "Healthy Adult"

    def test_schema_modes(self, client):
        categories = client.get("/api/entries/schema-modes").get_json()["categories"]

        assert [c["category"] for c in categories] == ["Child Modes", "Coping Modes", "Parent Modes", "Healthy Mode"]
        assert sum(len(c["modes"]) for c in categories) == 16
        assert categories[0]["modes"] == ["Vulnerable", "Angry"]


class TestUpdate:
    def test_update_deletes_dropped_recording(self, client, make_recording, audio):
        make_recording("a.m4a")
        make_recording("b.m4a")
        make_recording("c.m4a")
        created = client.post("/api/entries", json=_payload(
            situation=_audio("a.m4a"), thoughts=_audio("b.m4a"),
        )).get_json()["entry"]

        response = client.put(f"/api/entries/{created['id']}", json=_payload(
            thoughts=_audio("b.m4a"), feelings=_audio("c.m4a"),
        ))

        assert response.status_code == 200
        data = response.get_json()
        assert data["deleted_recordings"] == ["a.m4a"]
        assert data["entry"]["fields"]["situation"] is None
        assert audio.list_recordings() == ["b.m4a", "c.m4a"]

    def test_update_missing_entry(self, client):
        response = client.put("/api/entries/nope", json=_payload())
        assert response.status_code == 404

    def test_invalid_update_changes_nothing(self, client, make_recording, audio):
        make_recording("a.m4a")
        created = client.post("/api/entries", json=_payload(situation=_audio("a.m4a"))).get_json()["entry"]

        response = client.put(f"/api/entries/{created['id']}", json={"need_met": "perhaps"})

        assert response.status_code == 400
        assert audio.exists("a.m4a")
        entry = client.get(f"/api/entries/{created['id']}").get_json()
        assert entry["audio_filenames"] == ["a.m4a"]


class TestDelete:
    def test_delete_entry_and_recordings(self, client, make_recording, audio):
        make_recording("x.m4a")
        make_recording("y.m4a")
        make_recording("unrelated.m4a")
        created = client.post("/api/entries", json=_payload(
            situation=_audio("x.m4a"), result=_audio("y.m4a"),
        )).get_json()["entry"]

        response = client.delete(f"/api/entries/{created['id']}")

        assert response.status_code == 200
        assert sorted(response.get_json()["deleted_recordings"]) == ["x.m4a", "y.m4a"]
        assert audio.list_recordings() == ["unrelated.m4a"]
        assert client.get(f"/api/entries/{created['id']}").status_code == 404
        assert client.get("/api/entries").get_json()["entries"] == []

    def test_delete_missing_entry(self, client):
        assert client.delete("/api/entries/nope").status_code == 404


class TestDiscardDraft:
    def test_discard_new_draft(self, client, make_recording, audio):
        make_recording("draft.m4a")

        response = client.post("/api/entries/drafts/discard", json={"fields": {"wants": _audio("draft.m4a")}})

        assert response.status_code == 200
        assert response.get_json()["deleted_recordings"] == ["draft.m4a"]
        assert not audio.exists("draft.m4a")

    def test_discard_edit_draft_keeps_saved_recordings(self, client, make_recording, audio):
        make_recording("saved.m4a")
        make_recording("new.m4a")
        created = client.post("/api/entries", json=_payload(situation=_audio("saved.m4a"))).get_json()["entry"]

        response = client.post("/api/entries/drafts/discard", json={
            "entry_id": created["id"],
            "fields": {"situation": _audio("saved.m4a"), "facts": _audio("new.m4a")},
        })

        assert response.get_json()["deleted_recordings"] == ["new.m4a"]
        assert audio.list_recordings() == ["saved.m4a"]

    def test_discard_for_missing_entry(self, client):
        response = client.post("/api/entries/drafts/discard", json={"entry_id": "nope"})
        assert response.status_code == 404

    def test_discard_keeps_recordings_of_saved_entries(self, client, make_recording, audio):
        make_recording("saved.m4a")
        client.post("/api/entries", json=_payload(situation=_audio("saved.m4a")))

        response = client.post("/api/entries/drafts/discard", json={"fields": {"thoughts": _audio("saved.m4a")}})

        assert response.get_json()["deleted_recordings"] == []
        assert audio.exists("saved.m4a")

    def test_discard_rejects_non_object_body(self, client):
        response = client.post("/api/entries/drafts/discard", json=["x"])
        assert response.status_code == 400
        assert "error" in response.get_json()
