# entyre_cms/application/sections/update_section.py
from typing import Any, Dict

from entyre_cms.domain.exceptions import DuplicateKey
from entyre_cms.domain.sections.normalizer import normalize_section_payload
from entyre_cms.domain.sections.validator import UPDATE, validate_section_payload
from entyre_cms.models.section import Section
from entyre_cms.services.media import discard_media
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.transaction import transactional

from .common import (
    SECTION_ORDER_LOCK,
    index_conflict,
    index_taken,
    load_section,
    media_references,
)

# Keys whose change is reported in the audit entry
TRACKED_KEYS = (
    "sectionIndex",
    "title",
    "content",
    "type",
    "layout",
    "typography",
    "animation",
    "displayConditions",
    "seo",
    "payload",
    "isVisible",
    "customCSS",
    "customJS",
)


def update_section(section_id: str, data: Dict[str, Any]) -> Section:
    """
    Partially update a section.

    Unsupplied fields keep their stored values. When ``type`` changes the
    previous type's data is dropped in the same write. Uploaded media that
    the new payload no longer references is released after the commit.
    """
    section = load_section(section_id)
    existing = section.to_document()

    validated = validate_section_payload(data, mode=UPDATE, existing=existing)
    document = normalize_section_payload(validated, existing)

    changed = [key for key in TRACKED_KEYS if document.get(key) != existing.get(key)]
    conflict = index_conflict(document["sectionIndex"])

    kept = set(media_references(document["payload"]))
    released = [ref for ref in media_references(existing["payload"] or {}) if ref not in kept]

    with SECTION_ORDER_LOCK:
        with transactional(conflict=conflict):
            if "sectionIndex" in changed and index_taken(document["sectionIndex"], section.id):
                raise DuplicateKey(conflict)

            section.apply_document(document)

            log_action(
                action="section.update",
                entity_type="section",
                entity_id=section.id,
                payload={
                    "fields": changed,
                    "type": section.type,
                    "previousType": existing["type"] if "type" in changed else None,
                    "releasedMedia": released,
                },
            )

    for public_id in released:
        discard_media(public_id)

    return section
