# core/snapshot.py

import json
from pathlib import Path
from typing import List, Set, Tuple

from models import Butterfly, Catalog, DocumentRef
from .errors import SnapshotError
from .file_system import load_json_file, save_json_file

def write_snapshot(catalog: Catalog, path: Path) -> Path:
    """
    Writes the catalog as a single JSON file. This is the last step of a run,
    so a failure here is fatal.
    """
    path = Path(path)
    try:
        save_json_file(catalog.to_dict(), path)
    except (OSError, TypeError, ValueError) as e:
        raise SnapshotError(f"Could not write snapshot to {path}: {e}") from e
    return path

def read_snapshot(path: Path) -> Catalog:
    """Reads a catalog back from a snapshot file."""
    path = Path(path)
    try:
        data = load_json_file(path)
    except FileNotFoundError as e:
        raise SnapshotError(f"JSON file not found: {path}") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Failed to parse JSON file {path}: {e}") from e

    try:
        return Catalog.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot {path}: missing or invalid field {e}") from e

def into_pipeline_state(catalog: Catalog) -> Tuple[List[Butterfly], Set[DocumentRef]]:
    """
    Rebuilds the working state of a collector from a catalog. The set of pdf
    files is derived again from each butterfly's (pdf_src, dir_name).
    """
    butterflies = [Butterfly.from_dict(b.to_dict()) for b in catalog.records]
    documents = {b.document for b in butterflies if b.document}
    return butterflies, documents
