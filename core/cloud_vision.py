# core/cloud_vision.py

from pathlib import Path
from typing import List, Optional

import requests

from config import API_KEY_FILE_PATH, CLOUD_VISION_URI, REQUEST_TIMEOUT
from models import Color
from .errors import ColorAnalysisError

MAX_RESULTS = 10

def build_request(image_url: str) -> dict:
    """Builds the IMAGE_PROPERTIES request body for a single remote image."""
    return {
        "requests": [
            {
                "image": {"source": {"imageUri": image_url}},
                "features": [{"type": "IMAGE_PROPERTIES", "maxResults": MAX_RESULTS}]
            }
        ]
    }

def to_color(value: dict) -> Optional[Color]:
    """
    Converts one entry of `dominantColors.colors` into a Color.
    The API leaves out channels whose value is 0.
    """
    try:
        pixel_fraction = float(value['pixelFraction'])
        score = float(value['score'])
        rgb = value['color']
        channels = [int(rgb.get(name, 0)) for name in ('red', 'green', 'blue')]
    except (KeyError, TypeError, ValueError, AttributeError):
        return None
    if any(c < 0 or c > 255 for c in channels):
        return None
    return Color(pixel_fraction, score, "#" + "".join(f"{c:02x}" for c in channels))

def extract_colors(response_json: dict) -> List[Color]:
    """Pulls the dominant colors out of an annotate response."""
    try:
        colors = response_json['responses'][0]['imagePropertiesAnnotation']['dominantColors']['colors']
    except (KeyError, IndexError, TypeError):
        raise ColorAnalysisError("Unable to parse data")
    if not isinstance(colors, list):
        raise ColorAnalysisError("Unable to parse data")

    result = []
    for value in colors[:MAX_RESULTS]:
        color = to_color(value)
        if color is None:
            raise ColorAnalysisError("Unable to parse data")
        result.append(color)
    return result

class CloudVisionClient:
    """
    Asks Google Cloud Vision for the dominant colors of an image by URL.
    The API key is read from a local secret file the first time it is needed.
    """
    def __init__(self, api_key_path: Path = API_KEY_FILE_PATH, endpoint: str = CLOUD_VISION_URI,
                 timeout: float = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.api_key_path = Path(api_key_path)
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self._api_key = None

    @property
    def api_key(self) -> str:
        if self._api_key is None:
            try:
                self._api_key = self.api_key_path.read_text(encoding='utf-8').strip()
            except OSError as e:
                raise ColorAnalysisError(f"API key file not found: {self.api_key_path}") from e
        return self._api_key

    def analyze(self, image_url: str) -> List[Color]:
        try:
            response = self.session.post(
                self.endpoint,
                params={'key': self.api_key},
                json=build_request(image_url),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ColorAnalysisError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise ColorAnalysisError("Bad request")

        try:
            response_json = response.json()
        except ValueError:
            raise ColorAnalysisError("Unable to parse data")

        try:
            error = response_json['responses'][0].get('error')
        except (KeyError, IndexError, TypeError, AttributeError):
            raise ColorAnalysisError("Unable to parse data")
        if isinstance(error, dict):
            raise ColorAnalysisError("Cloud vision api failed to parse image")

        return extract_colors(response_json)
