import yaml
from pathlib import Path

# --- Core Configuration Loading ---

CONFIG_DIR = Path(__file__).parent

def load_yaml_config(filename):
    """Loads a YAML file from the config directory."""
    with open(CONFIG_DIR / filename, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)

# Load all configurations into constants
REGIONS = load_yaml_config('regions.yaml')
MAPPINGS = load_yaml_config('mappings.yaml')

# --- Expose mapping constants for easy access ---
NAME_EXCEPTIONS = MAPPINGS.get('NAME_EXCEPTIONS', {})
CATEGORY_SUFFIX = MAPPINGS.get('CATEGORY_SUFFIX', '科')
LEGEND_EXCLUSION = MAPPINGS.get('LEGEND_EXCLUSION', {})
FALLBACK_CATEGORIES = MAPPINGS.get('FALLBACK_CATEGORIES', {})
DEFAULT_BGCOLOR = MAPPINGS.get('DEFAULT_BGCOLOR', '#ffffff')

# --- URLS ---
BUTTERFLY_URL = "http://biokite.com/worldbutterfly/"
CLOUD_VISION_URI = "https://vision.googleapis.com/v1/images:annotate"
USER_AGENT = "butterfly-scraper/0.1"

# --- CORE FILE SYSTEM PATHS ---
# Everything downloaded lands under ASSET_DIRECTORY/<dir_name>/{images,pdf}.
ASSET_DIRECTORY = Path("./assets")
IMAGE_DIRECTORY = "images"
PDF_DIRECTORY = "pdf"
JSON_FILE_NAME = "butterfly.json"
SNAPSHOT_PATH = ASSET_DIRECTORY / JSON_FILE_NAME
CSV_FILE_PATH = Path("./butterfly.csv")
API_KEY_FILE_PATH = Path("./secrets/vision_api.key")

# --- REPORTING ---
REPORT_DIR = Path("./html/")
COLLECTION_REPORT_FILENAME = "collection_report.html"
SNAPSHOT_REPORT_FILENAME = "snapshot_report.html"

# --- CONCURRENCY ---
# Thread pool sizes; the Vision API is rate limited.
DOWNLOAD_POOL_NUM = 100
GCV_THREAD_POOL_NUM = 30
REQUEST_TIMEOUT = 30
