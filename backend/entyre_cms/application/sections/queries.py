# entyre_cms/application/sections/queries.py
from typing import List, Optional

from entyre_cms.models.section import Section

from .common import load_section


def list_sections(
    *,
    section_type: Optional[str] = None,
    visible: Optional[bool] = None,
    limit: Optional[int] = None,
) -> List[Section]:
    query = Section.query
    if section_type:
        query = query.filter(Section.type == section_type)
    if visible is not None:
        query = query.filter(Section.is_visible == visible)

    query = query.order_by(Section.section_index.asc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_section(section_id: str) -> Section:
    return load_section(section_id)
