from datetime import datetime, timedelta

from models import Submission
import utils

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _submit(client, image=("cover.png", PNG_BYTES, "image/png"), **overrides):
    data = {
        "projectName": "Acid Rain",
        "userName": "@tidal",
        "projectUrl": "https://strudel.cc/#abc",
    }
    data.update(overrides)
    files = {"image": image} if image else None
    return client.post("/api/submissions", data=data, files=files)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_create_submission_then_list_and_get(client):
    response = _submit(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["imageUrl"].startswith("/uploads/")
    assert body["imageUrl"].endswith(".png")

    listing = client.get("/api/submissions").json()
    assert [row["id"] for row in listing] == [body["id"]]
    assert listing[0]["projectName"] == "Acid Rain"
    assert listing[0]["imageUrl"] == body["imageUrl"]

    row = client.get(f"/api/submissions/{body['id']}").json()
    assert row["userName"] == "@tidal"
    assert row["projectUrl"] == "https://strudel.cc/#abc"

    image = client.get(body["imageUrl"])
    assert image.status_code == 200
    assert image.content == PNG_BYTES


def test_create_submission_missing_fields_persists_nothing(client):
    for field in ("projectName", "userName", "projectUrl"):
        response = _submit(client, **{field: ""})
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields"

    response = _submit(client, image=None)
    assert response.status_code == 400

    assert client.get("/api/submissions").json() == []


def test_create_submission_rejects_oversized_image(client, monkeypatch):
    monkeypatch.setattr(utils, "MAX_UPLOAD_BYTES", 8)
    response = _submit(client)
    assert response.status_code == 400
    assert client.get("/api/submissions").json() == []


def test_get_submission_invalid_and_unknown_id(client):
    assert client.get("/api/submissions/not-a-number").status_code == 400
    for raw in ("99999999999999999999", "0_1", "%201", "0", "-1", "1e3", "9" * 5000):
        response = client.get(f"/api/submissions/{raw}")
        assert response.status_code == 400, raw
        assert response.json()["detail"] == "Invalid id"
    response = client.get("/api/submissions/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Submission not found"


def test_list_submissions_newest_first(client, db_session):
    base = datetime(2025, 11, 20, 18, 0, 0)
    for offset, name in [(1, "middle"), (0, "oldest"), (2, "newest")]:
        db_session.add(Submission(
            project_name=name,
            user_name="dj",
            project_url="https://strudel.cc",
            image_url="/uploads/x.png",
            created_at=base + timedelta(minutes=offset),
        ))
    db_session.commit()

    names = [row["projectName"] for row in client.get("/api/submissions").json()]
    assert names == ["newest", "middle", "oldest"]
