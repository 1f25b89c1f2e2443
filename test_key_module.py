from datetime import datetime, timezone
from pathlib import Path

from key_module import build_base_url, folder_date, make_key, public_link


MTIME = datetime(2024, 3, 2, 10, 0, 0, tzinfo=timezone.utc).timestamp()


def test_key_uses_date_from_folder_name():
    path = Path("/rec/2024-03-01 Session/clip.mp4")
    assert make_key(path, MTIME, "level1") == "level1/2024-03-01/clip.mp4"


def test_key_falls_back_to_mtime_without_space():
    path = Path("/rec/NoDate/clip.mp4")
    assert make_key(path, MTIME, "level1") == "level1/2024-03-02/clip.mp4"


def test_key_falls_back_when_first_token_empty():
    path = Path("/rec/ leading space/clip.mp4")
    assert folder_date(path, MTIME) == "2024-03-02"


def test_first_token_taken_without_validation():
    path = Path("/rec/Algebra Session/clip.mp4")
    assert make_key(path, MTIME, "level1") == "level1/Algebra/clip.mp4"


def test_empty_prefix_omits_segment():
    path = Path("/rec/2024-03-01 Session/clip.mp4")
    assert make_key(path, MTIME, "") == "2024-03-01/clip.mp4"
    assert make_key(path, MTIME, "/") == "2024-03-01/clip.mp4"


def test_prefix_slashes_trimmed():
    path = Path("/rec/2024-03-01 Session/clip.mp4")
    assert make_key(path, MTIME, "/videos/level2/") == "videos/level2/2024-03-01/clip.mp4"


def test_base_url_derived_from_bucket_and_region():
    assert build_base_url("my-bucket", "eu-west-1") == "https://my-bucket.s3.eu-west-1.amazonaws.com"


def test_base_url_override_trims_trailing_slash():
    assert build_base_url("b", "r", "https://cdn.example.com/") == "https://cdn.example.com"


def test_public_link():
    assert public_link("https://cdn.example.com", "level1/2024-03-01/clip.mp4") == (
        "https://cdn.example.com/level1/2024-03-01/clip.mp4"
    )
