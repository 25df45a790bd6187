import json
import unicodedata
from pathlib import Path
from urllib.parse import unquote, urlparse

from .errors import AssetWriteError, FileNameUnknownError

def ensure_directory(directory: Path) -> Path:
    """
    Creates a directory and its parents. A directory that already exists,
    or that another worker creates at the same moment, is not an error.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory

def derive_file_name(url: str) -> str:
    """
    Returns the last path segment of a URL, percent-decoded and folded to
    half-width. Some file names on the site mix full- and half-width characters.
    """
    segment = unquote(urlparse(url).path).split('/')[-1]
    name = unicodedata.normalize('NFKC', segment).strip()
    if not name or name in ('.', '..'):
        raise FileNameUnknownError(f"No file name in url: {url}")
    # Width folding can turn a full-width slash into a separator
    if '/' in name or '\\' in name:
        raise FileNameUnknownError(f"Unusable file name {name!r} in url: {url}")
    return name

def save_bytes(content: bytes, filepath: Path) -> str:
    """Writes downloaded bytes to a file and returns its path as a string."""
    filepath = Path(filepath)
    try:
        with open(filepath, 'wb') as f:
            f.write(content)
    except OSError as e:
        raise AssetWriteError(f"Could not write {filepath}: {e}") from e
    return filepath.as_posix()

def save_json_file(data: dict, filepath: Path) -> Path:
    """Writes a dictionary as pretty-printed UTF-8 JSON, creating the parent directory."""
    filepath = Path(filepath)
    ensure_directory(filepath.parent)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return filepath

def load_json_file(filepath: Path) -> dict:
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)
