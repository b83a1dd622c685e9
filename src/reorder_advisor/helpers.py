import hashlib
from pathlib import Path

from reorder_advisor.errors import SourceDecodeError


def build_hash(*parts: str) -> str:
    h = hashlib.sha256()
    for index, part in enumerate(parts):
        if index:
            h.update(b"|")
        h.update(part.encode("utf-8"))
    return h.hexdigest()


def build_file_hash(file_path: str) -> str:
    return build_hash("F", file_path)


def read_source(path: Path) -> str:
    """Read a source file without translating its line separators."""
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceDecodeError(str(path)) from exc


def write_source(path: Path, text: str) -> None:
    path.write_bytes(text.encode("utf-8"))
