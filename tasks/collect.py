# tasks/collect.py

import sys

from config import COLLECTION_REPORT_FILENAME, CSV_FILE_PATH, SNAPSHOT_PATH
from core.errors import ReferenceDataError, SnapshotError
from core.reference_data import load_reference_data
from core.scraper import Client
from .reporting import generate_html_report, group_warnings_by_stage, warning_sections

def run_collect(images=True, pdfs=True, colors=True, csv=True, from_snapshot=None,
                output=None, report=False):
    """
    Scrapes the region pages (or loads a previous snapshot), collects the
    requested assets and writes the snapshot. Each flag maps to one stage.
    """
    print("🚀 Starting butterfly collection...")
    output = output or SNAPSHOT_PATH

    try:
        # Read the CSV before any download.
        reference_data = load_reference_data(CSV_FILE_PATH) if csv else None
        if from_snapshot:
            collector = Client.from_path(from_snapshot, reference_data=reference_data)
        else:
            collector = Client().collect_datas(reference_data=reference_data)
    except (ReferenceDataError, SnapshotError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    if not collector.butterflies:
        print("No butterflies were extracted. Nothing to do.")
        return None

    if images:
        collector.fetch_images()
    if pdfs:
        collector.fetch_pdfs()
    # Colors come from the remote image URL, not the downloaded file.
    if colors:
        collector.fetch_dominant_colors()
    if csv:
        collector.fetch_csv_info()
    try:
        catalog = collector.store_json(output)
    except SnapshotError as e:
        print(f"❌ {e}")
        sys.exit(1)

    stages = group_warnings_by_stage(collector.warnings)
    print(f"\n✨ Collection complete. {catalog.record_count} butterflies saved to {output}.")
    for stage, items in stages.items():
        print(f"  -> {len(items)} warning(s) during '{stage}'")

    if report:
        summary = {
            "Butterflies Saved": catalog.record_count,
            "Pdf Files Referenced": catalog.document_count,
            "Missing Images": sum(1 for b in catalog.records if not b.img_path),
            "Missing Pdf Files": sum(1 for b in catalog.records if b.pdf_src and not b.pdf_path),
            "Total Warnings": len(collector.warnings),
        }
        generate_html_report(
            "🦋 Butterfly Collection Report", summary,
            warning_sections(collector.warnings), COLLECTION_REPORT_FILENAME
        )
    return catalog
