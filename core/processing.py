import re
import unicodedata

def normalize_text(text: str) -> str:
    """
    Folds character width so that text scraped from the pages and text from
    the CSV file compare equal: full-width ASCII becomes ASCII, half-width
    katakana becomes full-width and runs of whitespace collapse to one space.
    """
    if not text:
        return ""
    text = unicodedata.normalize('NFKC', text)
    return " ".join(text.split())

def normalize_jp_name(text: str) -> str:
    """Japanese names never contain spaces, so all of them are dropped."""
    return re.sub(r'\s+', '', normalize_text(text))

def normalize_eng_name(text: str) -> str:
    return normalize_text(text)

def normalize_bgcolor(color: str) -> str:
    """
    Returns the color as a lower-case '#rrggbb' token, e.g. 'FFCC99' -> '#ffcc99'.
    Named colors ('white') are only lower-cased.
    """
    color = (color or "").strip().lower()
    if not color:
        return ""
    if re.fullmatch(r'#?[0-9a-f]{6}', color):
        return color if color.startswith('#') else f"#{color}"
    return color

def split_cell_lines(text: str) -> list:
    """Splits the text of a table cell into non-empty lines with whitespace collapsed."""
    lines = (" ".join(line.split()) for line in text.splitlines())
    return [line for line in lines if line]
