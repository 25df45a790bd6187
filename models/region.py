# models/region.py
from dataclasses import dataclass

@dataclass(frozen=True)
class RegionTarget:
    """One region page of the site and where its assets are stored."""
    dir_name: str
    region: str
    url: str
    encoding: str = "shift_jis"

    @classmethod
    def from_config(cls, entry: dict) -> "RegionTarget":
        return cls(
            dir_name=entry['dir_name'],
            region=entry['region'],
            url=entry['url'],
            encoding=entry.get('encoding', 'shift_jis')
        )
