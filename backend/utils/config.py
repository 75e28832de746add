"""Configuration from environment."""
import os
from dataclasses import dataclass

PORT = int(os.environ.get("PORT", "8001"))

# When TESTING=true, use test DB URL so tests never touch the dev document store.
if os.environ.get("TESTING") == "true":
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./slipways.db",
    )

# "sql" keeps documents in the local database; "firebase" talks to the realtime database REST API.
STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql").strip().lower()
FIREBASE_DATABASE_URL = os.environ.get("FIREBASE_DATABASE_URL", "https://boatlaunch.firebaseio.com")
FIREBASE_AUTH_TOKEN = os.environ.get("FIREBASE_AUTH_TOKEN") or None

# Local development runs the signing endpoint on this service; deployed clients point elsewhere.
SIGNING_BASE_URL = os.environ.get("SIGNING_BASE_URL", f"http://localhost:{PORT}/api")

PHOTOS_BUCKET = os.environ.get("S3_PHOTOS_BUCKET", "boatlaunch-photos")
PHOTOS_REGION = os.environ.get("S3_PHOTOS_REGION", "eu-west-1")
PHOTOS_BASE_URL = os.environ.get(
    "PHOTOS_BASE_URL",
    f"https://s3-{PHOTOS_REGION}.amazonaws.com/{PHOTOS_BUCKET}/WebSitePhotos/",
)

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",")
    if o.strip()
]


@dataclass(frozen=True)
class StorageConfig:
    """Object store settings used by the signing endpoint."""

    bucket_name: str | None
    region: str
    access_key_id: str | None
    secret_access_key: str | None


def storage_config() -> StorageConfig:
    """Storage settings read from the environment at call time."""
    return StorageConfig(
        bucket_name=os.environ.get("S3_BUCKET_NAME") or None,
        region=os.environ.get("AWS_REGION") or "us-east-1",
        access_key_id=os.environ.get("AWS_ACCESS_KEY_ID") or None,
        secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY") or None,
    )
