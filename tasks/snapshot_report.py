# tasks/snapshot_report.py

import sys
from collections import Counter
from html import escape

from config import SNAPSHOT_REPORT_FILENAME
from core.errors import SnapshotError
from core.snapshot import read_snapshot
from .reporting import generate_html_report

def run_snapshot_report(snapshot_path):
    """Summarizes an existing snapshot: entries per region and what is still missing."""
    print(f"🔎 Reading snapshot '{snapshot_path}'...")
    try:
        catalog = read_snapshot(snapshot_path)
    except SnapshotError as e:
        print(f"❌ {e}")
        sys.exit(1)

    records = catalog.records
    per_region = Counter(b.region for b in records)
    per_category = Counter(b.category or "(none)" for b in records)

    summary = {
        "Butterflies": catalog.record_count,
        "Pdf Files Referenced": catalog.document_count,
        "Missing Images": sum(1 for b in records if not b.img_path),
        "Missing Pdf Files": sum(1 for b in records if b.pdf_src and not b.pdf_path),
        "Missing Colors": sum(1 for b in records if not b.dominant_colors),
        "Missing Reference Data": sum(1 for b in records if not b.open_length),
    }

    def counter_list(counter):
        return "<ul>" + "".join(
            f"<li>{escape(name)}: <strong>{count}</strong></li>" for name, count in counter.most_common()
        ) + "</ul>"

    missing_images = "".join(
        f"<li><code>{escape(b.img_src)}</code> {escape(b.jp_name)}</li>" for b in records if not b.img_path
    )
    sections = [
        {'title': "Butterflies per Region", 'content': counter_list(per_region)},
        {'title': "Butterflies per Category", 'content': counter_list(per_category)},
    ]
    if missing_images:
        sections.append({'title': "Images Not Downloaded", 'content': f"<ul>{missing_images}</ul>"})

    return generate_html_report("🦋 Butterfly Snapshot Report", summary, sections, SNAPSHOT_REPORT_FILENAME)
