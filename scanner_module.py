# scanner_module.py
import os
import time
from pathlib import Path


MEDIA_EXTENSION = ".mp4"
STABLE_AGE_SECONDS = 30


class ScanError(Exception):
    pass


def is_stable_file(name: str, is_dir: bool, mtime: float, now: float | None = None) -> bool:
    """
    True when a file looks finished: a .mp4 (any case) that has not been
    modified for at least STABLE_AGE_SECONDS.
    """
    if is_dir:
        return False
    if os.path.splitext(name)[1].lower() != MEDIA_EXTENSION:
        return False
    if now is None:
        now = time.time()
    return now - mtime >= STABLE_AGE_SECONDS


def _walk_error(e: OSError) -> None:
    print("[WARN] walk error:", e)


def list_new_files(root: Path, known: set[str], now: float | None = None) -> list[Path]:
    """
    Walk `root` and return stable media files whose base name is not in `known`.

    Only the first file seen with a given base name is returned.
    """
    if now is None:
        now = time.time()

    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ScanError(f"cannot scan {root}: {e}") from e

    found: list[Path] = []
    seen = set(known)

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_walk_error):
        for name in filenames:
            if os.path.splitext(name)[1].lower() != MEDIA_EXTENSION:
                continue
            if name in seen:
                continue

            path = os.path.join(dirpath, name)
            try:
                info = os.stat(path)
            except OSError as e:
                print("[WARN] stat error:", e)
                continue

            if not is_stable_file(name, False, info.st_mtime, now):
                continue

            seen.add(name)
            found.append(Path(path))

    return found
