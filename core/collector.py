# core/collector.py
"""
ButterflyCollector takes the butterflies extracted from the region pages and
collects everything that hangs off them: images, pdf files, dominant colors
and the reference data from the CSV file. The stage methods can be chained:

    collector.fetch_images().fetch_pdfs().fetch_dominant_colors().fetch_csv_info()
    collector.store_json()

A failure on a single butterfly never stops a stage; it is printed and kept
in `collector.warnings`.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set
from urllib.parse import urljoin

from config import (
    ASSET_DIRECTORY, BUTTERFLY_URL, DOWNLOAD_POOL_NUM, GCV_THREAD_POOL_NUM,
    IMAGE_DIRECTORY, JSON_FILE_NAME, PDF_DIRECTORY
)
from models import Butterfly, Catalog, CollectionWarning, DocumentRef
from .cloud_vision import CloudVisionClient
from .errors import ButterflyError
from .file_system import derive_file_name, ensure_directory, save_bytes
from .http_client import HttpClient
from .reference_data import ReferenceDataset, load_reference_data
from .snapshot import into_pipeline_state, read_snapshot, write_snapshot

class ButterflyCollector:
    def __init__(
        self,
        butterflies: Iterable[Butterfly],
        documents: Iterable[DocumentRef],
        reference_data: Optional[ReferenceDataset] = None,
        *,
        http_client: Optional[HttpClient] = None,
        analyzer=None,
        asset_dir: Path = ASSET_DIRECTORY,
        base_url: str = BUTTERFLY_URL,
        download_workers: int = DOWNLOAD_POOL_NUM,
        analysis_workers: int = GCV_THREAD_POOL_NUM,
    ):
        self.butterflies: List[Butterfly] = list(butterflies)
        self.documents: Set[DocumentRef] = set(documents)
        self.reference_data = reference_data
        self.http_client = http_client or HttpClient()
        self.analyzer = analyzer
        self.asset_dir = Path(asset_dir)
        self.base_url = base_url
        self.download_workers = download_workers
        self.analysis_workers = analysis_workers
        self.warnings: List[CollectionWarning] = []

    # --- Constructors ---

    @classmethod
    def from_parse_results(cls, results: list, **kwargs) -> "ButterflyCollector":
        """Merges the parse results of several region pages into one collector."""
        butterflies, documents = [], set()
        for result in results:
            butterflies.extend(result.butterflies)
            documents.update(result.documents)
        return cls(butterflies, documents, **kwargs)

    @classmethod
    def from_snapshot(cls, path: Path, **kwargs) -> "ButterflyCollector":
        """Resumes from a saved snapshot instead of scraping the pages again."""
        print(f"Loading butterflies from '{path}'...")
        butterflies, documents = into_pipeline_state(read_snapshot(path))
        print(f"Loaded {len(butterflies)} butterflies and {len(documents)} pdf files.")
        return cls(butterflies, documents, **kwargs)

    # --- Helpers ---

    @property
    def region_dirs(self) -> List[str]:
        return sorted({b.dir_name for b in self.butterflies})

    def _warn(self, identity: str, stage: str, cause) -> None:
        print(f"  -> ⚠️ [{stage}] {identity}: {cause}")
        self.warnings.append(CollectionWarning(identity, stage, str(cause)))

    def _prepare_directories(self, subdirectory: str, stage: str) -> None:
        for dir_name in self.region_dirs:
            try:
                ensure_directory(self.asset_dir / dir_name / subdirectory)
            except OSError as e:
                self._warn(dir_name, stage, f"Could not create directory: {e}")

    def _run_pool(self, items: list, work: Callable, workers: int) -> list:
        """
        Runs `work` on every item in a bounded thread pool and returns
        (item, result, error) triples. Only ButterflyErrors are caught;
        workers never touch shared state.
        """
        if not items:
            return []
        outcomes = []
        with ThreadPoolExecutor(max_workers=max(1, min(workers, len(items)))) as executor:
            futures = {executor.submit(work, item): item for item in items}
            for future in as_completed(futures):
                item = futures[future]
                try:
                    outcomes.append((item, future.result(), None))
                except ButterflyError as e:
                    outcomes.append((item, None, e))
        return outcomes

    def _download(self, url: str, directory: Path) -> str:
        result = self.http_client.fetch(url)
        file_name = derive_file_name(result.url)
        return save_bytes(result.content, directory / file_name)

    def image_url(self, butterfly: Butterfly) -> str:
        return urljoin(self.base_url, butterfly.img_src)

    # --- Stages ---

    def fetch_images(self) -> "ButterflyCollector":
        """Downloads every image into assets/<dir_name>/images."""
        print(f"🚀 Downloading {len(self.butterflies)} image files...")
        self._prepare_directories(IMAGE_DIRECTORY, 'image')

        def work(index):
            butterfly = self.butterflies[index]
            directory = self.asset_dir / butterfly.dir_name / IMAGE_DIRECTORY
            return self._download(self.image_url(butterfly), directory)

        stored = 0
        indices = list(range(len(self.butterflies)))
        for index, img_path, error in self._run_pool(indices, work, self.download_workers):
            butterfly = self.butterflies[index]
            if error is not None:
                self._warn(butterfly.label, 'image', f"Image could not be fetched: {error}")
                continue
            butterfly.img_path = img_path
            stored += 1

        print(f"✅ Finished downloading images: {stored} of {len(indices)} stored.")
        return self

    def fetch_pdfs(self) -> "ButterflyCollector":
        """
        Downloads each distinct pdf file once into assets/<dir_name>/pdf, then
        sets the path on every butterfly linking to it.
        """
        print(f"🚀 Downloading {len(self.documents)} pdf files...")
        self._prepare_directories(PDF_DIRECTORY, 'pdf')

        def work(document):
            directory = self.asset_dir / document.dir_name / PDF_DIRECTORY
            return self._download(urljoin(self.base_url, document.pdf_src), directory)

        documents = sorted(self.documents, key=lambda d: (d.dir_name, d.pdf_src))
        stored = {}
        for document, pdf_path, error in self._run_pool(documents, work, self.download_workers):
            if error is not None:
                self._warn(document.pdf_src, 'pdf', f"Unable to download pdf file: {error}")
                continue
            stored[document] = pdf_path

        for butterfly in self.butterflies:
            pdf_path = stored.get(butterfly.document)
            if pdf_path:
                butterfly.pdf_path = pdf_path

        print(f"✅ Finished downloading pdf files: {len(stored)} of {len(documents)} stored.")
        return self

    def fetch_dominant_colors(self) -> "ButterflyCollector":
        """
        Asks Cloud Vision for the dominant colors of each image. The remote
        image URL is analyzed, not the downloaded file.
        """
        if self.analyzer is None:
            self.analyzer = CloudVisionClient()
        print(f"🚀 Analyzing {len(self.butterflies)} images with Cloud Vision...")

        def work(index):
            return self.analyzer.analyze(self.image_url(self.butterflies[index]))

        analyzed = 0
        indices = [i for i, b in enumerate(self.butterflies) if b.img_src]
        for index, colors, error in self._run_pool(indices, work, self.analysis_workers):
            butterfly = self.butterflies[index]
            if error is not None:
                self._warn(butterfly.label, 'color', f"GCV request failed for {self.image_url(butterfly)}: {error}")
                continue
            butterfly.dominant_colors = list(colors)
            analyzed += 1

        print(f"✅ All the images have been analyzed: {analyzed} of {len(indices)} succeeded.")
        return self

    def fetch_csv_info(self) -> "ButterflyCollector":
        """Copies distribution, wingspan, diet and remarks from the reference CSV."""
        if self.reference_data is None:
            self.reference_data = load_reference_data()

        found = 0
        for butterfly in self.butterflies:
            row = self.reference_data.get(butterfly.jp_name, butterfly.eng_name)
            if row is None:
                self._warn(butterfly.label, 'csv', "Data not found")
                continue
            butterfly.add_csv_data(row)
            found += 1

        print(f"✅ Reference data found for {found} of {len(self.butterflies)} butterflies.")
        return self

    # --- Output ---

    def finalize(self) -> Catalog:
        """Removes duplicates (by Japanese name) and freezes the result into a Catalog."""
        return Catalog.build(self.butterflies, document_count=len(self.documents))

    def store_json(self, path: Optional[Path] = None) -> Catalog:
        """Finalizes the collection and writes it as the snapshot file."""
        path = Path(path) if path else self.asset_dir / JSON_FILE_NAME
        catalog = self.finalize()
        print(f"Storing the results to json file on: {path}")
        write_snapshot(catalog, path)
        print(f"✨ Saved {catalog.record_count} butterflies and {catalog.document_count} pdf references.")
        return catalog
