# entyre_cms/application/sections/reorder_sections.py
from typing import Any, List

from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.models.section import Section
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.order import apply_order, merge_order
from entyre_cms.utils.transaction import transactional

from .common import SECTION_ORDER_LOCK


def _check_ids(ordered_ids: Any, known: set) -> List[str]:
    if not isinstance(ordered_ids, list):
        raise ValidationError(["sectionIds must be an array of section ids"])

    errors = []
    seen = set()
    for position, section_id in enumerate(ordered_ids):
        if not isinstance(section_id, str):
            errors.append(f"sectionIds[{position}] must be a string")
            continue
        if section_id in seen:
            errors.append(f"Duplicate section id: {section_id}")
        elif section_id not in known:
            errors.append(f"Unknown section id: {section_id}")
        seen.add(section_id)

    if errors:
        raise ValidationError(errors)
    return list(ordered_ids)


def reorder_sections(ordered_ids: Any) -> List[Section]:
    """
    Rewrite ``sectionIndex`` to 1..N.

    Listed sections take 1..k in the given order, unlisted ones follow in
    their previous relative order. Indices are rewritten in two phases inside
    one transaction, so no two sections ever share an index and a failure
    leaves the previous order untouched.
    """
    with SECTION_ORDER_LOCK:
        with transactional():
            current = Section.query.order_by(Section.section_index.asc()).all()
            ids = _check_ids(ordered_ids, {section.id for section in current})

            before = [section.id for section in current]
            ordered = apply_order(merge_order(ids, current), "section_index")

            log_action(
                action="section.reorder",
                entity_type="section",
                entity_id="*",
                payload={
                    "before": before,
                    "after": [section.id for section in ordered],
                },
            )

    return ordered
