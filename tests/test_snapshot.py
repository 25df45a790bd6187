import json

import pytest

from core.errors import SnapshotError
from core.snapshot import into_pipeline_state, read_snapshot, write_snapshot
from models import Butterfly, Catalog, Color, DocumentRef

def sample_catalog():
    kiageha = Butterfly(
        region="旧北区", img_src="pa-sp/papi/kiageha.jpg", pdf_src="pa-sp/papi/kiageha.pdf",
        bgcolor="#ffcc99", category="アゲハチョウ科", dir_name="old_north",
        url="http://biokite.com/worldbutterfly/butterfly-PArc.htm#PAall",
    )
    kiageha.add_names("キアゲハ", "Papilio machaon")
    kiageha.img_path = "assets/old_north/images/kiageha.jpg"
    kiageha.pdf_path = "assets/old_north/pdf/kiageha.pdf"
    kiageha.distribution = "旧北区全域"
    kiageha.open_length = 80
    kiageha.diet = "セリ科"
    kiageha.dominant_colors = [Color(0.3125, 0.87, "#f0e010"), Color(0.1, 0.05, "#000000")]

    monshiro = Butterfly(region="新北区", img_src="na-sp/monshiro.jpg", dir_name="new_north", url="http://x")
    monshiro.add_names("モンシロチョウ", "Pieris rapae")

    return Catalog.build([kiageha, monshiro], document_count=1)

def test_snapshot_roundtrip_is_lossless(tmp_path):
    catalog = sample_catalog()
    path = write_snapshot(catalog, tmp_path / "nested" / "butterfly.json")

    assert read_snapshot(path) == catalog

def test_snapshot_file_layout(tmp_path):
    catalog = sample_catalog()
    path = write_snapshot(catalog, tmp_path / "butterfly.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"records", "record_count", "document_count", "created_at"}
    assert data["record_count"] == 2
    assert data["records"][0]["jp_name"] == "キアゲハ"
    assert data["records"][0]["dominant_colors"][0] == {
        "pixel_fraction": 0.3125, "score": 0.87, "hex_color": "#f0e010"
    }
    assert "キアゲハ" in path.read_text(encoding="utf-8")

def test_into_pipeline_state_rebuilds_documents():
    catalog = sample_catalog()
    butterflies, documents = into_pipeline_state(catalog)

    assert [b.jp_name for b in butterflies] == ["キアゲハ", "モンシロチョウ"]
    assert documents == {DocumentRef("pa-sp/papi/kiageha.pdf", "old_north")}
    # Working copies must not alias the frozen catalog
    butterflies[0].pdf_path = ""
    assert catalog.records[0].pdf_path == "assets/old_north/pdf/kiageha.pdf"

def test_read_missing_snapshot(tmp_path):
    with pytest.raises(SnapshotError, match="not found"):
        read_snapshot(tmp_path / "missing.json")

def test_read_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotError, match="Failed to parse"):
        read_snapshot(path)

def test_read_snapshot_missing_field(tmp_path):
    path = tmp_path / "old.json"
    path.write_text(json.dumps({"records": [], "record_count": 0}), encoding="utf-8")

    with pytest.raises(SnapshotError, match="document_count"):
        read_snapshot(path)

def test_write_snapshot_failure_is_fatal(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(SnapshotError):
        write_snapshot(sample_catalog(), blocker / "butterfly.json")
