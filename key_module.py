# key_module.py
from datetime import datetime, timezone
from pathlib import Path


def folder_date(path: Path, mtime: float) -> str:
    """
    Date segment for a recording.

    Recording folders are named "<date> <description>", e.g.
    "2024-01-15 Algebra Session". The first token is taken as-is without
    checking that it is a date. Folders without a space fall back to the
    file's modification date (UTC).
    """
    folder = path.parent.name
    if " " in folder:
        token = folder.split(" ")[0]
        if token:
            return token
    return datetime.fromtimestamp(mtime, tz=timezone.utc).strftime("%Y-%m-%d")


def make_key(path: Path, mtime: float, prefix: str) -> str:
    date = folder_date(path, mtime)
    prefix = prefix.strip("/")
    if prefix:
        return f"{prefix}/{date}/{path.name}"
    return f"{date}/{path.name}"


def build_base_url(bucket: str, region: str, base_url: str = "") -> str:
    if base_url:
        return base_url.rstrip("/")
    return f"https://{bucket}.s3.{region}.amazonaws.com"


def public_link(base_url: str, key: str) -> str:
    return f"{base_url}/{key}"
