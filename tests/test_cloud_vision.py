from unittest.mock import MagicMock

import pytest
import requests

from core.cloud_vision import CloudVisionClient, build_request, extract_colors, to_color
from core.errors import ColorAnalysisError
from models import Color

IMAGE_URL = "http://biokite.com/worldbutterfly/pa-sp/papi/kiageha.jpg"

def annotate_response(colors):
    return {"responses": [{"imagePropertiesAnnotation": {"dominantColors": {"colors": colors}}}]}

def mock_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response

@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "vision_api.key"
    path.write_text("secret-key\n", encoding="utf-8")
    return path

@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)

def test_build_request_asks_for_image_properties():
    body = build_request(IMAGE_URL)

    request = body["requests"][0]
    assert request["image"] == {"source": {"imageUri": IMAGE_URL}}
    assert request["features"] == [{"type": "IMAGE_PROPERTIES", "maxResults": 10}]

def test_missing_channels_default_to_zero():
    color = to_color({"color": {"red": 255, "blue": 16}, "score": 0.5, "pixelFraction": 0.25})

    assert color == Color(0.25, 0.5, "#ff0010")

def test_invalid_color_entries():
    assert to_color({"color": {"red": 300}, "score": 0.1, "pixelFraction": 0.1}) is None
    assert to_color({"color": {"red": 10}}) is None

def test_extract_colors_keeps_at_most_ten():
    colors = [{"color": {"green": i}, "score": 0.1, "pixelFraction": 0.01} for i in range(12)]

    result = extract_colors(annotate_response(colors))

    assert len(result) == 10
    assert result[1].hex_color == "#000100"

def test_extract_colors_rejects_unexpected_layout():
    with pytest.raises(ColorAnalysisError, match="Unable to parse data"):
        extract_colors({"responses": [{}]})

def test_analyze_sends_key_as_query_parameter(session, key_file):
    session.post.return_value = mock_response(payload=annotate_response(
        [{"color": {"red": 1, "green": 2, "blue": 3}, "score": 0.7, "pixelFraction": 0.2}]
    ))
    client = CloudVisionClient(api_key_path=key_file, endpoint="https://vision.test/annotate", session=session)

    assert client.analyze(IMAGE_URL) == [Color(0.2, 0.7, "#010203")]

    args, kwargs = session.post.call_args
    assert args == ("https://vision.test/annotate",)
    assert kwargs["params"] == {"key": "secret-key"}
    assert kwargs["json"] == build_request(IMAGE_URL)

def test_analyze_non_200_is_bad_request(session, key_file):
    session.post.return_value = mock_response(status_code=403, payload={})
    client = CloudVisionClient(api_key_path=key_file, session=session)

    with pytest.raises(ColorAnalysisError, match="Bad request"):
        client.analyze(IMAGE_URL)

def test_analyze_error_object_in_response(session, key_file):
    session.post.return_value = mock_response(
        payload={"responses": [{"error": {"code": 3, "message": "Bad image data."}}]}
    )
    client = CloudVisionClient(api_key_path=key_file, session=session)

    with pytest.raises(ColorAnalysisError, match="failed to parse image"):
        client.analyze(IMAGE_URL)

def test_analyze_transport_error(session, key_file):
    session.post.side_effect = requests.ConnectionError("unreachable")
    client = CloudVisionClient(api_key_path=key_file, session=session)

    with pytest.raises(ColorAnalysisError):
        client.analyze(IMAGE_URL)

def test_missing_key_file(session, tmp_path):
    client = CloudVisionClient(api_key_path=tmp_path / "missing.key", session=session)

    with pytest.raises(ColorAnalysisError, match="API key"):
        client.analyze(IMAGE_URL)
    session.post.assert_not_called()
