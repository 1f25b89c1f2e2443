# s3_module.py
from pathlib import Path

import boto3

from key_module import make_key, public_link


VIDEO_CONTENT_TYPE = "video/mp4"


def make_s3_client(region: str, access_key_id: str = "", secret_access_key: str = ""):
    """
    Build an S3 client for `region`.

    Keys from the config are handed to boto3 directly; without them boto3
    uses its default credential chain (env vars, ~/.aws, instance role).
    """
    kwargs = {"region_name": region}
    if access_key_id and secret_access_key:
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key
    return boto3.client("s3", **kwargs)


def upload_recording(client, file_path: Path, bucket: str, prefix: str, base_url: str) -> str:
    """
    Upload `file_path` as one PUT and return its public link.

    OSError and botocore errors are left to the caller.
    """
    info = file_path.stat()
    key = make_key(file_path, info.st_mtime, prefix)

    print(f"Uploading to S3 bucket='{bucket}', key='{key}'")
    with file_path.open("rb") as body:
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=VIDEO_CONTENT_TYPE,
        )

    return public_link(base_url, key)
