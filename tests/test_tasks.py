import pytest

from core.snapshot import read_snapshot, write_snapshot
from models import Butterfly, Catalog, CollectionWarning
from tasks import collect, reporting
from tasks.collect import run_collect
from tasks.snapshot_report import run_snapshot_report

@pytest.fixture
def report_dir(tmp_path, monkeypatch):
    directory = tmp_path / "html"
    monkeypatch.setattr(reporting, "REPORT_DIR", directory)
    return directory

@pytest.fixture
def snapshot_path(tmp_path):
    kiageha = Butterfly(region="旧北区", img_src="pa-sp/papi/kiageha.jpg", pdf_src="pa-sp/papi/kiageha.pdf",
                        category="アゲハチョウ科", dir_name="old_north")
    kiageha.add_names("キアゲハ", "Papilio machaon")
    setsukei = Butterfly(region="旧北区", img_src="pa-sp/misc/setsukei.jpg", dir_name="old_north")
    setsukei.add_names("雪渓蝶", "Parnassius glacialis")
    return write_snapshot(Catalog.build([kiageha, setsukei], document_count=1), tmp_path / "butterfly.json")

def test_warning_sections_group_by_stage():
    warnings = [
        CollectionWarning("雪渓蝶", "image", "File not found"),
        CollectionWarning("a.pdf", "pdf", "Unable to download pdf file"),
        CollectionWarning("キアゲハ", "image", "<timeout>"),
    ]

    sections = reporting.warning_sections(warnings)

    assert [s["title"] for s in sections] == ["Warnings: image (2)", "Warnings: pdf (1)"]
    assert "&lt;timeout&gt;" in sections[0]["content"]

def test_generate_html_report(report_dir):
    path = reporting.generate_html_report("Title", {"Missing Images": 2}, [], "report.html")

    assert path == report_dir / "report.html"
    html = path.read_text(encoding="utf-8")
    assert "Missing Images: <strong>2</strong>" in html

def test_run_collect_from_snapshot(snapshot_path, tmp_path, report_dir):
    output = tmp_path / "out" / "butterfly.json"

    catalog = run_collect(images=False, pdfs=False, colors=False, csv=False,
                          from_snapshot=snapshot_path, output=output, report=True)

    assert catalog.record_count == 2
    assert read_snapshot(output).records == catalog.records
    assert (report_dir / "collection_report.html").exists()

def test_run_collect_missing_snapshot_exits(tmp_path):
    with pytest.raises(SystemExit):
        run_collect(from_snapshot=tmp_path / "missing.json")

def test_snapshot_report(snapshot_path, report_dir):
    path = run_snapshot_report(snapshot_path)

    html = path.read_text(encoding="utf-8")
    assert "旧北区: <strong>2</strong>" in html
    assert "Images Not Downloaded" in html

def test_run_collect_missing_csv_fails_before_any_stage(snapshot_path, tmp_path, monkeypatch):
    monkeypatch.setattr(collect, "CSV_FILE_PATH", tmp_path / "missing.csv")
    loaded = []
    monkeypatch.setattr(collect.Client, "from_path", staticmethod(lambda *args, **kwargs: loaded.append(args)))
    output = tmp_path / "out.json"

    with pytest.raises(SystemExit):
        run_collect(from_snapshot=snapshot_path, output=output)

    assert loaded == []
    assert not output.exists()

def test_run_collect_joins_reference_data(snapshot_path, tmp_path, csv_path, monkeypatch):
    monkeypatch.setattr(collect, "CSV_FILE_PATH", csv_path)

    catalog = run_collect(images=False, pdfs=False, colors=False, csv=True,
                          from_snapshot=snapshot_path, output=tmp_path / "out.json")

    records = {b.jp_name: b for b in catalog.records}
    assert records["雪渓蝶"].open_length == 45
    assert records["キアゲハ"].open_length == 80
