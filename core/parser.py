# core/parser.py

from typing import List, NamedTuple, Set, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from config import (
    CATEGORY_SUFFIX, DEFAULT_BGCOLOR, FALLBACK_CATEGORIES, LEGEND_EXCLUSION, NAME_EXCEPTIONS
)
from models import Butterfly, CollectionWarning, DocumentRef, RegionTarget
from .errors import StructuralError
from .processing import normalize_bgcolor, split_cell_lines

class ParseResult(NamedTuple):
    butterflies: List[Butterfly]
    documents: Set[DocumentRef]
    warnings: List[CollectionWarning]

# --- PRIVATE HELPER FUNCTIONS ---

def _cell_text(cell: Tag) -> str:
    """Returns the text of a cell with every <br> turned into a newline."""
    parts = []
    for node in cell.descendants:
        if isinstance(node, Tag):
            if node.name == 'br':
                parts.append('\n')
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            parts.append(str(node))
    return ''.join(parts)

def _colspan(cell: Tag) -> int:
    try:
        return int(cell.get('colspan', 1))
    except (TypeError, ValueError):
        return 1

def _own_color(tag: Tag) -> str:
    return normalize_bgcolor(tag.get('bgcolor', ''))

def _table_color(row: Tag, top_table: Tag) -> str:
    """
    The color a row inherits: that of the nearest enclosing table declaring
    one, up to the top-level table, else the default.
    """
    table = row.find_parent('table')
    while table is not None:
        color = _own_color(table)
        if color:
            return color
        if table is top_table:
            break
        table = table.find_parent('table')
    return normalize_bgcolor(DEFAULT_BGCOLOR)

def _is_excluded_legend_cell(cell: Tag) -> bool:
    """The one colspan cell layout the site uses for decoration rather than a legend."""
    if not LEGEND_EXCLUSION:
        return False
    return (
        _own_color(cell) == normalize_bgcolor(LEGEND_EXCLUSION.get('bgcolor', ''))
        and cell.get('width', '').strip() == str(LEGEND_EXCLUSION.get('width', ''))
    )

def _is_legend_row(cells: List[Tag]) -> bool:
    return any(_colspan(cell) > 1 and not _is_excluded_legend_cell(cell) for cell in cells)

def _category_label(text: str) -> str:
    """
    Returns the trailing text of a legend cell, starting at the word that
    carries the category suffix, e.g. '■ アゲハチョウ科 Papilionidae' ->
    'アゲハチョウ科 Papilionidae'.
    """
    text = " ".join(text.split())
    index = text.find(CATEGORY_SUFFIX)
    if index < 0:
        return ""
    start = text.rfind(' ', 0, index) + 1
    return text[start:]

def _row_cells(row: Tag) -> List[Tag]:
    """Direct cells of a row. Cells wrapping a nested table are visited through its own rows."""
    return [cell for cell in row.find_all(['td', 'th'], recursive=False) if cell.find('table') is None]

def _top_level_tables(soup: BeautifulSoup) -> List[Tag]:
    return [table for table in soup.find_all('table') if table.find_parent('table') is None]

# --- PUBLIC HELPERS ---

def extract_names(text: str) -> Tuple[str, str]:
    """
    Splits the text of a name cell into (japanese name, english name).
    A few cells break the usual two-line layout and are listed verbatim in
    NAME_EXCEPTIONS.
    """
    lines = split_cell_lines(text)
    full_text = "\n".join(lines)
    if full_text in NAME_EXCEPTIONS:
        jp_name, eng_name = NAME_EXCEPTIONS[full_text]
        return jp_name, eng_name
    if len(lines) < 2:
        raise StructuralError(f"Text description of a butterfly could not be extracted: {full_text!r}")
    return lines[0], lines[1]

def resolve_category(color: str, legend: dict) -> str:
    """Looks up the category of a color; returns '' when it cannot be resolved."""
    if color in legend:
        return legend[color]
    fallbacks = {normalize_bgcolor(k): v for k, v in FALLBACK_CATEGORIES.items()}
    return fallbacks.get(color, "")

# --- MAIN ORCHESTRATOR FUNCTION ---

def parse_region_page(html: str, target: RegionTarget) -> ParseResult:
    """
    Walks the tables of one region page and rebuilds its butterflies.

    Image cells and name cells are separate: every image cell creates a
    butterfly, and each later name cell names the oldest butterfly that has
    no name yet. Legend rows (colspan cells) map a background color to a
    family for the rest of their table.

    Raises StructuralError if the page cannot be read; the page is then
    discarded as a whole.
    """
    soup = BeautifulSoup(html, 'html.parser')
    butterflies: List[Butterfly] = []
    documents: Set[DocumentRef] = set()
    warnings: List[CollectionWarning] = []
    next_unnamed = 0

    for table in _top_level_tables(soup):
        legend = {}

        for row in table.find_all('tr'):
            cells = _row_cells(row)
            if not cells:
                continue
            table_color = _table_color(row, table)

            # 1. Legend rows only update the color -> category map
            if _is_legend_row(cells):
                for cell in cells:
                    text = _cell_text(cell)
                    if CATEGORY_SUFFIX in text:
                        legend[_own_color(cell) or table_color] = _category_label(text)
                continue

            # 2. Content rows, left to right
            for cell in cells:
                img = cell.find('img')
                if img is not None:
                    img_src = (img.get('src') or '').strip()
                    if not img_src:
                        raise StructuralError(f"Image source not found on {target.url}")

                    link = img.find_parent('a') or cell.find('a', href=True)
                    pdf_src = (link.get('href') or '').strip() if link is not None else ''
                    color = _own_color(cell) or table_color
                    category = resolve_category(color, legend)

                    butterfly = Butterfly(
                        region=target.region,
                        img_src=img_src,
                        pdf_src=pdf_src,
                        bgcolor=color,
                        category=category,
                        dir_name=target.dir_name,
                        url=target.url
                    )
                    butterflies.append(butterfly)
                    if butterfly.document:
                        documents.add(butterfly.document)
                    if not category:
                        print(f"  -> ⚠️ No category for color {color}: {img_src}")
                        warnings.append(CollectionWarning(img_src, 'parse', f"No category for color {color}"))
                    continue

                text = _cell_text(cell)
                if not text.strip():
                    continue

                jp_name, eng_name = extract_names(text)
                if next_unnamed >= len(butterflies):
                    raise StructuralError(
                        f"Index of given butterfly does not exist: {jp_name} ({target.url})"
                    )
                butterflies[next_unnamed].add_names(jp_name, eng_name)
                next_unnamed += 1

    for butterfly in butterflies[next_unnamed:]:
        print(f"  -> ⚠️ No name found for image: {butterfly.img_src}")
        warnings.append(CollectionWarning(butterfly.img_src, 'parse', "No name found"))

    return ParseResult(butterflies, documents, warnings)
