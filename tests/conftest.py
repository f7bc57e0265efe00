from pathlib import Path
import os
import sys
import tempfile

import pytest

ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Must be in place before any backend module is imported
TEST_DATA_DIR = tempfile.mkdtemp(prefix="strudel-api-tests-")
os.environ["DATA_DIR"] = TEST_DATA_DIR
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DATA_DIR}/test.sqlite"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ.pop("S3_BUCKET_NAME", None)
os.environ.pop("AWS_REGION", None)

from fastapi.testclient import TestClient

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def client():
    from database import Base, engine
    from server import app

    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(client):
    from database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def admin_headers():
    return {"x-api-key": ADMIN_KEY}


class FakeS3:
    """Stands in for the boto3 client; keys containing ``broken`` fail to sign."""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType):
        self.objects[Key] = (Bucket, Body, ContentType)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        if "broken" in Params["Key"]:
            raise RuntimeError("signing failed")
        return f"https://{Params['Bucket']}.example/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture
def fake_bucket(monkeypatch):
    import utils

    fake = FakeS3()
    monkeypatch.setattr(utils, "S3_CLIENT", fake)
    monkeypatch.setattr(utils, "S3_BUCKET_NAME", "resumes-bucket")
    return fake


def register_account(client, resume=None, **overrides):
    data = {
        "name": "Ada Lovelace",
        "email": "ada@uvic.ca",
        "vnumber": "V00123456",
        "password": "correct horse battery",
        "bio": "Writes patterns in mini-notation",
    }
    data.update(overrides)
    files = {"resume": resume} if resume else None
    return client.post("/api/account-reg", data=data, files=files)


def login(client, email="ada@uvic.ca", password="correct horse battery"):
    return client.post("/api/login", json={"email": email, "password": password})
