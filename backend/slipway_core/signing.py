"""Server side of the upload hand-off: pre-signed PUT URLs for the object store."""
import logging
from dataclasses import dataclass

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from utils.config import StorageConfig

LOG = logging.getLogger(__name__)

SIGNED_URL_EXPIRES_S = 60
PUBLIC_READ = "public-read"


class SigningConfigurationError(RuntimeError):
    """Bucket or credentials missing on the server. Not retryable."""

    def __init__(self, error: str, details: str) -> None:
        super().__init__(error)
        self.error = error
        self.details = details


class SigningError(RuntimeError):
    """The storage SDK could not produce a signed URL."""


@dataclass(frozen=True)
class SignedUpload:
    signed_request: str
    url: str


def check_storage_config(config: StorageConfig) -> None:
    if not config.bucket_name:
        raise SigningConfigurationError(
            "S3_BUCKET_NAME not configured",
            "Please add S3_BUCKET_NAME to your environment variables",
        )
    if not config.access_key_id or not config.secret_access_key:
        raise SigningConfigurationError(
            "AWS credentials not configured",
            "Please add AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY to your environment variables",
        )


def public_url(bucket_name: str, key: str) -> str:
    return f"https://{bucket_name}.s3.amazonaws.com/{key}"


def sign_upload(config: StorageConfig, file_name: str, file_type: str) -> SignedUpload:
    """Pre-signed put_object URL (60 s, public-read, content type bound) plus the eventual public URL."""
    check_storage_config(config)
    client = boto3.client(
        "s3",
        region_name=config.region,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        config=Config(signature_version="s3v4"),
    )
    try:
        signed = client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": config.bucket_name,
                "Key": file_name,
                "ContentType": file_type,
                "ACL": PUBLIC_READ,
            },
            ExpiresIn=SIGNED_URL_EXPIRES_S,
        )
    except (BotoCoreError, ClientError) as e:
        LOG.exception("Error generating signed URL for %s", file_name)
        raise SigningError("Error generating signed URL") from e
    return SignedUpload(signed_request=signed, url=public_url(config.bucket_name, file_name))
