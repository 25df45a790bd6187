# core/html_preprocessor.py

import codecs
import re

# Pages labelled Shift_JIS are really Windows-31J, as browsers read them.
LEGACY_CODECS = {"shift_jis": "cp932"}

def decode_page(raw: bytes, encoding: str) -> str:
    """
    Decodes a page with its declared legacy encoding. Undecodable bytes are
    replaced rather than failing the whole page.
    """
    name = codecs.lookup(encoding).name
    return raw.decode(LEGACY_CODECS.get(name, name), errors='replace')

def remove_font_tags(html: str) -> str:
    """
    Removes <font> tags from raw HTML before it is parsed by BeautifulSoup.
    The region pages were written with an old HTML editor that wraps text in
    unbalanced font tags, which can move cells around in the parsed tree.

    Args:
        html (str): The raw HTML content.

    Returns:
        str: The HTML content with <font> tags removed.
    """
    # Remove opening font tags, e.g., <font face="ＭＳ Ｐゴシック">
    html = re.sub(r'<font[^>]*>', '', html, flags=re.IGNORECASE)
    # Remove closing font tags
    html = re.sub(r'</font>', '', html, flags=re.IGNORECASE)

    return html
