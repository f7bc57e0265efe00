import re
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import HTTPException

from auth import create_access_token, decode_download_token, decode_token, get_password_hash, verify_password
from utils import (
    RESUME_DOWNLOAD_PATH,
    build_disk_filename,
    build_resume_key,
    generate_resume_url,
    sanitize_object_name,
)
from scripts.seed_submissions import parse_created_at, seed_submissions


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("s3cret", hashed)
    assert not verify_password("s3cret!", "not-a-bcrypt-hash")


def test_token_carries_id_and_email():
    payload = decode_token(create_access_token(7, "ada@uvic.ca"))
    assert payload["sub"] == "7"
    assert payload["email"] == "ada@uvic.ca"
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token(7, "ada@uvic.ca", expires_delta=timedelta(seconds=-5))
    with pytest.raises(HTTPException) as excinfo:
        decode_token(token)
    assert excinfo.value.status_code == 401


def test_sanitize_object_name():
    assert sanitize_object_name("my résumé (1).pdf") == "my_r_sum___1_.pdf"
    assert sanitize_object_name("../../etc/passwd") == "passwd"
    assert sanitize_object_name("") == "file"


def test_storage_names():
    assert re.fullmatch(r"\d+-\d+\.png", build_disk_filename("Cover.PNG"))
    assert re.fullmatch(r"\d+-\d+", build_disk_filename(None))
    assert re.fullmatch(r"resumes/\d+-[0-9a-f]{12}-cv\.pdf", build_resume_key("cv.pdf"))


def test_generate_resume_url_without_key():
    assert generate_resume_url(None) is None
    url = generate_resume_url("resumes/1-cv.pdf")
    assert url.startswith(RESUME_DOWNLOAD_PATH + "?token=")
    token = parse_qs(urlparse(url).query)["token"][0]
    assert decode_download_token(token) == "resumes/1-cv.pdf"


def test_resume_keys_are_not_guessable():
    assert build_resume_key("cv.pdf") != build_resume_key("cv.pdf")


def test_access_token_lives_for_a_day():
    payload = decode_token(create_access_token(7, "ada@uvic.ca"))
    lifetime = payload["exp"] - datetime.now(timezone.utc).timestamp()
    assert timedelta(hours=23, minutes=59).total_seconds() < lifetime <= timedelta(hours=24).total_seconds()


def test_parse_created_at():
    parsed = parse_created_at("2025-11-20T18:30:00.000Z")
    assert (parsed.year, parsed.hour, parsed.minute) == (2025, 18, 30)
    assert parsed.utcoffset() == timedelta(0)
    assert parse_created_at(None).tzinfo is not None


def test_seed_submissions_replaces_rows(client, db_session):
    client.post(
        "/api/submissions",
        data={"projectName": "old", "userName": "u", "projectUrl": "https://strudel.cc"},
        files={"image": ("a.png", b"png", "image/png")},
    )
    records = [
        {"id": 10, "projectName": "First", "userName": "a", "projectUrl": "https://strudel.cc/1",
         "imageUrl": "/uploads/1.png", "createdAt": "2025-11-20T18:00:00Z"},
        {"id": 11, "projectName": "Second", "userName": "b", "projectUrl": "https://strudel.cc/2",
         "imageUrl": "/uploads/2.png", "createdAt": "2025-11-21T18:00:00Z"},
    ]
    assert seed_submissions(db_session, records) == 2
    db_session.commit()

    rows = client.get("/api/submissions").json()
    assert [(row["id"], row["projectName"]) for row in rows] == [(11, "Second"), (10, "First")]
