# entyre_cms/application/sections/common.py
import threading
from typing import Any, Dict, List

from entyre_cms.domain.exceptions import NotFound
from entyre_cms.models.section import Section
from entyre_cms.utils.identifiers import validate_identifier

# Serializes every write that assigns or rewrites section indices within this
# process; the unique constraint stays the authority across processes.
SECTION_ORDER_LOCK = threading.Lock()

# Array payload fields whose items may reference uploaded media
MEDIA_ITEM_FIELDS = ("images", "banners")


def load_section(section_id) -> Section:
    section = Section.query.filter_by(id=validate_identifier(section_id, "section")).first()
    if not section:
        raise NotFound("Section not found")
    return section


def index_taken(section_index: int, exclude_id=None) -> bool:
    query = Section.query.filter(Section.section_index == section_index)
    if exclude_id is not None:
        query = query.filter(Section.id != exclude_id)
    return query.first() is not None


def index_conflict(section_index) -> str:
    return f"sectionIndex {section_index} is already in use"


def media_references(payload: Dict[str, Any]) -> List[str]:
    """publicIds of the uploaded media referenced by a section payload."""
    refs = []
    for field in MEDIA_ITEM_FIELDS:
        for item in payload.get(field) or []:
            public_id = item.get("publicId") if isinstance(item, dict) else None
            if public_id:
                refs.append(public_id)
    return refs
