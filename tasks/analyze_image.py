# tasks/analyze_image.py

import sys
from urllib.parse import urljoin

from config import BUTTERFLY_URL
from core.cloud_vision import CloudVisionClient
from core.errors import ColorAnalysisError

def run_analyze_image(image_url: str):
    """Prints the dominant colors Cloud Vision finds in a single image."""
    url = urljoin(BUTTERFLY_URL, image_url)
    print(f"Analyzing {url}...")
    try:
        colors = CloudVisionClient().analyze(url)
    except ColorAnalysisError as e:
        print(f"❌ {e}")
        sys.exit(1)

    for color in colors:
        print(f"  {color.hex_color}  fraction={color.pixel_fraction:.4f}  score={color.score:.4f}")
    return colors
