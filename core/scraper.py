from typing import List, Optional

import config
from models import CollectionWarning, RegionTarget
from .collector import ButterflyCollector
from .errors import ButterflyError
from .html_preprocessor import decode_page, remove_font_tags
from .http_client import HttpClient
from .parser import ParseResult, parse_region_page

def load_region_targets() -> List[RegionTarget]:
    """Builds the list of region pages from regions.yaml."""
    return [RegionTarget.from_config(entry) for entry in config.REGIONS]

class RegionScraper:
    """
    Downloads one region page and hands it to the table parser.
    """
    def __init__(self, target: RegionTarget, http_client: Optional[HttpClient] = None):
        self.target = target
        self.http_client = http_client or HttpClient()

    def fetch_html(self) -> str:
        result = self.http_client.fetch(self.target.url)
        # 1. Decode with the page's own encoding, then clean before parsing.
        html = decode_page(result.content, self.target.encoding)
        return remove_font_tags(html)

    def fetch_data(self) -> ParseResult:
        return parse_region_page(self.fetch_html(), self.target)

class Client:
    """
    Entry point for building a ButterflyCollector, either by scraping the
    region pages (`collect_datas`) or from a saved snapshot (`from_path`).
    """
    def __init__(self, targets: Optional[List[RegionTarget]] = None, http_client: Optional[HttpClient] = None):
        self.targets = targets if targets is not None else load_region_targets()
        self.http_client = http_client or HttpClient()

    def collect_datas(self, **collector_kwargs):
        """
        Scrapes every region page in turn. A page that fails to download or
        parse is skipped and reported; the other pages are still collected.
        """
        results = []
        warnings = []
        for target in self.targets:
            print(f"Extracting data from: {target.region} ({target.url})")
            try:
                result = RegionScraper(target, self.http_client).fetch_data()
            except ButterflyError as e:
                print(f"  -> ❌ ERROR: Failed to extract {target.url}: {e}")
                warnings.append(CollectionWarning(target.url, 'page', str(e)))
                continue
            results.append(result)
            warnings.extend(result.warnings)
            print(f"  -> ✅ Found {len(result.butterflies)} butterflies and {len(result.documents)} pdf files.")

        collector_kwargs.setdefault('http_client', self.http_client)
        collector = ButterflyCollector.from_parse_results(results, **collector_kwargs)
        collector.warnings.extend(warnings)
        return collector

    @staticmethod
    def from_path(json_path, **collector_kwargs):
        """Restores a ButterflyCollector from a snapshot file."""
        return ButterflyCollector.from_snapshot(json_path, **collector_kwargs)
