# models/butterfly.py

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.processing import normalize_bgcolor, normalize_eng_name, normalize_jp_name

@dataclass
class Color:
    """A dominant color reported by Cloud Vision."""
    pixel_fraction: float
    score: float
    hex_color: str

    def to_dict(self) -> dict:
        return {
            'pixel_fraction': self.pixel_fraction,
            'score': self.score,
            'hex_color': self.hex_color
        }

@dataclass(frozen=True)
class DocumentRef:
    """A PDF linked from a region page; the same PDF may be linked from several cells."""
    pdf_src: str
    dir_name: str

@dataclass
class Butterfly:
    """
    A single catalog entry.

    The region pages list images first and names afterwards, so a Butterfly is
    created with empty names which are filled in later by `add_names`.
    Field names double as the snapshot keys and must not change.
    """
    # Core Identity
    region: str
    img_src: str
    pdf_src: str = ""
    bgcolor: str = ""
    category: str = ""
    dir_name: str = ""
    url: str = ""
    jp_name: str = ""
    eng_name: str = ""

    # Downloaded assets
    img_path: Optional[str] = None
    pdf_path: str = ""

    # Reference data
    distribution: str = ""
    open_length: int = 0
    diet: Optional[str] = None
    remarks: Optional[str] = None

    # Image analysis
    dominant_colors: List[Color] = field(default_factory=list)

    def __post_init__(self):
        self.bgcolor = normalize_bgcolor(self.bgcolor)

    @property
    def key(self) -> Tuple[str, str]:
        """The identity of the butterfly once both names are set."""
        return (self.jp_name, self.eng_name)

    @property
    def is_named(self) -> bool:
        return bool(self.jp_name) and bool(self.eng_name)

    @property
    def label(self) -> str:
        """Used in log lines and warnings, falls back to the image for unnamed entries."""
        return self.jp_name or self.eng_name or self.img_src

    @property
    def document(self) -> Optional[DocumentRef]:
        if not self.pdf_src:
            return None
        return DocumentRef(self.pdf_src, self.dir_name)

    def add_names(self, jp_name: str, eng_name: str) -> bool:
        """
        Sets both names, normalizing their character width.
        Only the first call has an effect; returns False if names were already set.
        """
        if self.jp_name:
            return False
        self.jp_name = normalize_jp_name(jp_name)
        self.eng_name = normalize_eng_name(eng_name)
        return True

    def add_csv_data(self, row: "ReferenceRow"):
        self.distribution = row.distribution
        self.open_length = row.open_length
        self.diet = row.diet
        self.remarks = row.remarks

    def to_dict(self) -> dict:
        """Converts the butterfly to the dictionary stored in the snapshot."""
        return {
            'region': self.region,
            'category': self.category,
            'img_src': self.img_src,
            'pdf_src': self.pdf_src,
            'img_path': self.img_path,
            'pdf_path': self.pdf_path,
            'jp_name': self.jp_name,
            'eng_name': self.eng_name,
            'bgcolor': self.bgcolor,
            'distribution': self.distribution,
            'open_length': self.open_length,
            'diet': self.diet,
            'remarks': self.remarks,
            'dominant_colors': [c.to_dict() for c in self.dominant_colors],
            'dir_name': self.dir_name,
            'url': self.url
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Butterfly":
        """Factory method to rebuild a Butterfly from a snapshot entry."""
        return cls(
            region=data['region'],
            category=data.get('category', ''),
            img_src=data['img_src'],
            pdf_src=data.get('pdf_src', ''),
            img_path=data.get('img_path'),
            pdf_path=data.get('pdf_path', ''),
            jp_name=data.get('jp_name', ''),
            eng_name=data.get('eng_name', ''),
            bgcolor=data.get('bgcolor', ''),
            distribution=data.get('distribution', ''),
            open_length=int(data.get('open_length', 0)),
            diet=data.get('diet'),
            remarks=data.get('remarks'),
            dominant_colors=[Color(**c) for c in data.get('dominant_colors', [])],
            dir_name=data.get('dir_name', ''),
            url=data.get('url', '')
        )

@dataclass
class ReferenceRow:
    """Supplemental facts about a butterfly, read from the CSV file."""
    distribution: str
    open_length: int
    diet: Optional[str] = None
    remarks: Optional[str] = None
