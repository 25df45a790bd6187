# core/reference_data.py

import csv
from pathlib import Path
from typing import Dict, Optional, Tuple

from config import CSV_FILE_PATH
from models import ReferenceRow
from .errors import ReferenceDataError
from .processing import normalize_eng_name, normalize_jp_name, normalize_text

# Column positions in butterfly.csv
ENG_NAME, JP_NAME, OPEN_LENGTH, DISTRIBUTION, DIET, REMARKS = 0, 1, 3, 4, 5, 6
REQUIRED_COLUMNS = DISTRIBUTION + 1

def _optional(value: str) -> Optional[str]:
    value = normalize_text(value)
    return value or None

class ReferenceDataset:
    """Reference rows looked up by the normalized (jp_name, eng_name) pair."""

    def __init__(self, rows: Dict[Tuple[str, str], ReferenceRow]):
        self.rows = rows

    def __len__(self):
        return len(self.rows)

    def get(self, jp_name: str, eng_name: str) -> Optional[ReferenceRow]:
        return self.rows.get((normalize_jp_name(jp_name), normalize_eng_name(eng_name)))

def parse_row(values: list) -> Tuple[Tuple[str, str], ReferenceRow]:
    """Converts one CSV record into its lookup key and ReferenceRow."""
    if len(values) < REQUIRED_COLUMNS:
        raise ValueError(f"expected at least {REQUIRED_COLUMNS} columns, got {len(values)}")
    try:
        open_length = int(values[OPEN_LENGTH].strip())
    except ValueError:
        raise ValueError(f"open_length is not a number: {values[OPEN_LENGTH]!r}")

    key = (normalize_jp_name(values[JP_NAME]), normalize_eng_name(values[ENG_NAME]))
    row = ReferenceRow(
        distribution=normalize_text(values[DISTRIBUTION]),
        open_length=open_length,
        diet=_optional(values[DIET]) if len(values) > DIET else None,
        remarks=_optional(values[REMARKS]) if len(values) > REMARKS else None
    )
    return key, row

def load_reference_data(path: Path = CSV_FILE_PATH) -> ReferenceDataset:
    """
    Reads the CSV file (with a header row) into a ReferenceDataset.
    Any malformed record makes the whole load fail.
    """
    path = Path(path)
    print(f"Loading reference data from '{path}'...")
    rows = {}
    try:
        with open(path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.reader(f)
            next(reader, None)
            for values in reader:
                if not any(v.strip() for v in values):
                    continue
                try:
                    key, row = parse_row(values)
                except ValueError as e:
                    raise ReferenceDataError(f"Failed to parse CSV record in {path} (line {reader.line_num}): {e}")
                rows[key] = row
    except UnicodeDecodeError as e:
        raise ReferenceDataError(f"CSV file is not UTF-8: {path} ({e})") from e
    except OSError as e:
        raise ReferenceDataError(f"CSV file not found: {path}") from e
    except csv.Error as e:
        raise ReferenceDataError(f"Failed to parse CSV record in {path}: {e}") from e

    print(f"Loaded {len(rows)} reference rows.")
    return ReferenceDataset(rows)
