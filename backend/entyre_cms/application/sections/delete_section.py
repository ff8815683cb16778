# entyre_cms/application/sections/delete_section.py
from typing import Any, Dict

from entyre_cms.extensions import db
from entyre_cms.services.media import discard_media
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.transaction import transactional

from .common import load_section, media_references


def delete_section(section_id: str) -> Dict[str, Any]:
    """
    Hard-delete a section and release the media its items uploaded.

    Returns ``{id, sectionIndex, title}`` of the removed section. Remaining
    indices are left as they are; gaps are allowed.
    """
    section = load_section(section_id)

    summary = {
        "id": section.id,
        "sectionIndex": section.section_index,
        "title": section.title,
    }
    media = media_references(section.payload or {})

    with transactional():
        db.session.delete(section)

        log_action(
            action="section.delete",
            entity_type="section",
            entity_id=summary["id"],
            payload={**summary, "media": media},
        )

    for public_id in media:
        discard_media(public_id)

    return summary
