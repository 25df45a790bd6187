from .butterfly import Butterfly, Color, DocumentRef, ReferenceRow
from .catalog import Catalog, CollectionWarning, dedup_by_jp_name
from .region import RegionTarget
