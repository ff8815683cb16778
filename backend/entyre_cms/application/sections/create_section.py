# entyre_cms/application/sections/create_section.py
from typing import Any, Dict

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import DuplicateKey
from entyre_cms.domain.sections.normalizer import normalize_section_payload
from entyre_cms.domain.sections.validator import CREATE, validate_section_payload
from entyre_cms.models.section import Section
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.order import next_index
from entyre_cms.utils.transaction import transactional

from .common import SECTION_ORDER_LOCK, index_conflict, index_taken


def create_section(data: Dict[str, Any]) -> Section:
    """
    Validate, normalize and insert a new section.

    ``sectionIndex`` is optional; without it the section is appended after
    the current maximum. A taken index raises ``DuplicateKey``.
    """
    validated = validate_section_payload(data, mode=CREATE)
    document = normalize_section_payload(validated)

    section = Section()

    with SECTION_ORDER_LOCK:
        if document["sectionIndex"] is None:
            document["sectionIndex"] = next_index(Section, "section_index")
        conflict = index_conflict(document["sectionIndex"])

        # unique(section_index) stays the authority if another process wins
        with transactional(conflict=conflict):
            if index_taken(document["sectionIndex"]):
                raise DuplicateKey(conflict)

            section.apply_document(document)
            db.session.add(section)
            db.session.flush()

            log_action(
                action="section.create",
                entity_type="section",
                entity_id=section.id,
                payload={
                    "type": section.type,
                    "sectionIndex": section.section_index,
                    "title": section.title,
                },
            )

    return section
