# entyre_cms/normalizers/section.py
from entyre_cms.domain.sections.normalizer import (
    SUB_OBJECT_DEFAULTS,
    expand_payload,
    merge_sub_object,
)
from entyre_cms.domain.sections.registry import DEFAULT_SECTION_TYPE
from .dates import iso


def normalize_section(section):
    """
    Canonical API shape of a section.

    Every sub-object is filled with defaults and every type-specific field is
    present; fields the current type does not own carry their zero value.
    """
    section_type = section.type or DEFAULT_SECTION_TYPE

    data = {
        "id": section.id,
        "_id": section.id,
        "sectionIndex": section.section_index,
        "title": section.title or "",
        "content": section.content or "",
        "type": section_type,
    }

    stored = {
        "layout": section.layout,
        "typography": section.typography,
        "animation": section.animation,
        "displayConditions": section.display_conditions,
        "seo": section.seo,
    }
    for name in SUB_OBJECT_DEFAULTS:
        data[name] = merge_sub_object(name, None, stored[name])

    data.update(expand_payload(section_type, section.payload))

    data["isVisible"] = True if section.is_visible is None else bool(section.is_visible)
    data["customCSS"] = section.custom_css or ""
    data["customJS"] = section.custom_js or ""
    data["createdAt"] = iso(section.created_at)
    data["updatedAt"] = iso(section.updated_at)
    return data
