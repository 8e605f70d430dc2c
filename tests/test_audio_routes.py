"""Integration tests for the /api/audio endpoints."""

import io

from audio.manager import MicrophonePermission


class TestPermissionRoutes:
    def test_status(self, client):
        assert client.get("/api/audio/permission").get_json() == {"status": "granted"}

    def test_request_resolves_undetermined(self, client, audio):
        audio.permission_status = MicrophonePermission.UNDETERMINED

        data = client.post("/api/audio/permission").get_json()

        assert data == {"granted": True, "status": "granted"}


class TestRecordingRoutes:
    def test_record_chunks_and_stop(self, client, audio):
        assert client.post("/api/audio/recordings/start").status_code == 200
        client.post("/api/audio/recordings/chunk", data=b"abc", content_type="application/octet-stream")
        client.post("/api/audio/recordings/chunk", data=b"def", content_type="application/octet-stream")

        response = client.post("/api/audio/recordings/stop")

        assert response.status_code == 200
        filename = response.get_json()["filename"]
        assert audio.path_for(filename).read_bytes() == b"abcdef"

    def test_start_denied(self, client, audio):
        audio.permission_status = MicrophonePermission.DENIED

        response = client.post("/api/audio/recordings/start")

        assert response.status_code == 403

    def test_stop_without_recording(self, client):
        assert client.post("/api/audio/recordings/stop").status_code == 409

    def test_chunk_without_recording(self, client):
        assert client.post("/api/audio/recordings/chunk", data=b"x").status_code == 409

    def test_upload(self, client, audio):
        response = client.post(
            "/api/audio/recordings",
            data={"audio": (io.BytesIO(b"voice"), "memo.m4a")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 201
        assert audio.exists(response.get_json()["filename"])

    def test_upload_wrong_type(self, client):
        response = client.post(
            "/api/audio/recordings",
            data={"audio": (io.BytesIO(b"voice"), "memo.exe")},
            content_type="multipart/form-data",
        )
        assert response.status_code == 400

    def test_upload_without_file(self, client):
        response = client.post("/api/audio/recordings", data={}, content_type="multipart/form-data")
        assert response.status_code == 400


class TestPlaybackRoutes:
    def test_play_streams_file(self, client, audio, make_recording):
        make_recording("p.m4a", b"sound")

        response = client.get("/api/audio/recordings/p.m4a")

        assert response.status_code == 200
        assert response.data == b"sound"
        assert response.mimetype == "audio/mp4"
        response.close()
        assert audio.current_playback_filename == "p.m4a"

    def test_play_missing(self, client):
        assert client.get("/api/audio/recordings/missing.m4a").status_code == 404

    def test_playback_controls(self, client, make_recording):
        make_recording("p.m4a")
        client.get("/api/audio/recordings/p.m4a").close()

        assert client.post("/api/audio/playback/pause").get_json()["is_playing"] is False
        assert client.post("/api/audio/playback/resume").get_json()["is_playing"] is True
        state = client.post("/api/audio/playback/stop").get_json()
        assert state == {"is_playing": False, "current_playback_filename": None}
        assert client.get("/api/audio/playback").get_json() == state

    def test_unknown_playback_action(self, client):
        assert client.post("/api/audio/playback/rewind").status_code == 404


class TestDeleteRoute:
    def test_delete_is_idempotent(self, client, audio, make_recording):
        make_recording("d.m4a")

        assert client.delete("/api/audio/recordings/d.m4a").status_code == 200
        assert client.delete("/api/audio/recordings/d.m4a").status_code == 200
        assert not audio.exists("d.m4a")
