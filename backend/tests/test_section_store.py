import random

import pytest

from entyre_cms.application.sections.create_section import create_section
from entyre_cms.application.sections.delete_section import delete_section
from entyre_cms.application.sections.queries import get_section, list_sections
from entyre_cms.application.sections.reorder_sections import reorder_sections
from entyre_cms.application.sections.update_section import update_section
from entyre_cms.domain.exceptions import DuplicateKey, InvalidIdentifier, NotFound, ValidationError
from entyre_cms.models.audit_log import AuditLog
from entyre_cms.models.section import Section


def indices():
    return [(s.title, s.section_index) for s in list_sections()]


def test_create_appends_after_current_maximum(app):
    first = create_section({"title": "One"})
    create_section({"title": "Five", "sectionIndex": 5})
    last = create_section({"title": "Six"})

    assert first.section_index == 1
    assert last.section_index == 6
    assert indices() == [("One", 1), ("Five", 5), ("Six", 6)]


def test_create_rejects_taken_index(app):
    create_section({"title": "A", "sectionIndex": 2})

    with pytest.raises(DuplicateKey):
        create_section({"title": "B", "sectionIndex": 2})

    assert Section.query.count() == 1


def test_create_writes_audit_entry(app):
    section = create_section({"title": "Audited", "type": "text"})

    entry = AuditLog.query.filter_by(action="section.create").one()
    assert entry.entity_id == section.id
    assert entry.payload["title"] == "Audited"
    assert entry.actor_id is None


def test_update_type_switch_drops_previous_fields(app):
    section = create_section({
        "title": "Card",
        "type": "card",
        "cardButtonText": "Go",
        "cardButtonLink": "/go",
    })

    updated = update_section(section.id, {
        "type": "hero",
        "heroSubtitle": "Welcome",
    })

    assert updated.type == "hero"
    assert updated.payload == {"heroSubtitle": "Welcome", "heroImage": "", "heroButtons": []}
    assert "cardButtonText" not in updated.to_document()

    entry = AuditLog.query.filter_by(action="section.update").one()
    assert entry.payload["previousType"] == "card"
    assert "type" in entry.payload["fields"]


def test_update_keeps_unsupplied_payload_fields(app):
    section = create_section({
        "title": "Card",
        "type": "card",
        "cardButtonText": "Go",
        "cardButtonLink": "/go",
        "cardButtonStyle": "outline",
    })

    updated = update_section(section.id, {"cardButtonLink": "/elsewhere"})

    assert updated.payload == {
        "cardButtonText": "Go",
        "cardButtonLink": "/elsewhere",
        "cardButtonStyle": "outline",
    }


def test_update_rejects_index_held_by_another_section(app):
    create_section({"title": "A", "sectionIndex": 1})
    other = create_section({"title": "B", "sectionIndex": 2})

    with pytest.raises(DuplicateKey):
        update_section(other.id, {"sectionIndex": 1})

    assert get_section(other.id).section_index == 2


def test_update_to_own_index_is_allowed(app):
    section = create_section({"title": "A", "sectionIndex": 3})
    assert update_section(section.id, {"sectionIndex": 3, "title": "A2"}).title == "A2"


def test_lookup_errors(app):
    with pytest.raises(InvalidIdentifier):
        get_section("not-an-id")
    with pytest.raises(NotFound):
        get_section("00000000-0000-0000-0000-000000000000")


def test_reorder_listed_first_then_the_rest(app):
    a = create_section({"title": "A"})
    b = create_section({"title": "B"})
    c = create_section({"title": "C", "sectionIndex": 10})
    d = create_section({"title": "D"})

    ordered = reorder_sections([c.id, a.id])

    assert [s.id for s in ordered] == [c.id, a.id, b.id, d.id]
    assert indices() == [("C", 1), ("A", 2), ("B", 3), ("D", 4)]


def test_reorder_rejects_unknown_and_duplicate_ids(app):
    a = create_section({"title": "A"})
    b = create_section({"title": "B"})

    with pytest.raises(ValidationError) as excinfo:
        reorder_sections([b.id, b.id, "ghost"])

    assert excinfo.value.details == [
        f"Duplicate section id: {b.id}",
        "Unknown section id: ghost",
    ]
    assert indices() == [("A", 1), ("B", 2)]

    with pytest.raises(ValidationError):
        reorder_sections({"ids": [a.id]})


def test_delete_returns_summary_and_releases_media(app, media_store):
    media_store.objects["entyre/sections/fake-9"] = b"img"
    section = create_section({
        "title": "Gallery",
        "type": "gallery",
        "images": [
            {"url": "https://media.test/a", "publicId": "entyre/sections/fake-9"},
            {"url": "https://example.com/b"},
        ],
    })
    keep = create_section({"title": "Stays"})

    summary = delete_section(section.id)

    assert summary == {"id": section.id, "sectionIndex": 1, "title": "Gallery"}
    assert media_store.destroyed == ["entyre/sections/fake-9"]
    assert [s.id for s in list_sections()] == [keep.id]
    assert keep.section_index == 2


def test_list_filters(app):
    create_section({"title": "Shown"})
    create_section({"title": "Hidden", "isVisible": False})
    create_section({"title": "Hero", "type": "hero"})

    assert [s.title for s in list_sections(visible=True)] == ["Shown", "Hero"]
    assert [s.title for s in list_sections(section_type="hero")] == ["Hero"]
    assert [s.title for s in list_sections(limit=1)] == ["Shown"]


def test_update_releases_replaced_gallery_media(app, media_store):
    section = create_section({
        "title": "Gallery",
        "type": "gallery",
        "images": [
            {"url": "https://media.test/old", "publicId": "entyre/sections/old"},
            {"url": "https://media.test/kept", "publicId": "entyre/sections/kept"},
        ],
    })

    update_section(section.id, {
        "images": [
            {"url": "https://media.test/kept", "publicId": "entyre/sections/kept"},
            {"url": "https://m/new"},
        ],
    })

    assert media_store.destroyed == ["entyre/sections/old"]

    entry = AuditLog.query.filter_by(action="section.update").one()
    assert entry.payload["releasedMedia"] == ["entyre/sections/old"]


def test_type_switch_releases_dropped_media(app, media_store):
    section = create_section({
        "title": "Carousel",
        "type": "banner-carousel",
        "banners": [{"image": "https://media.test/b", "publicId": "entyre/sections/b"}],
    })

    update_section(section.id, {"type": "text"})

    assert media_store.destroyed == ["entyre/sections/b"]


def test_update_without_media_changes_releases_nothing(app, media_store):
    section = create_section({
        "title": "Gallery",
        "type": "gallery",
        "images": [{"url": "https://media.test/a", "publicId": "entyre/sections/a"}],
    })

    update_section(section.id, {"title": "Renamed gallery"})

    assert media_store.destroyed == []


def test_indices_stay_unique_under_random_operations(app):
    rng = random.Random(20240611)

    def current_indices():
        return [s.section_index for s in Section.query.all()]

    for step in range(120):
        taken = set(current_indices())
        ids = [s.id for s in Section.query.all()]
        operation = rng.choice(["append", "explicit", "explicit", "delete", "reorder"])

        if operation == "append":
            create_section({"title": f"step {step}"})
        elif operation == "explicit":
            index = rng.randint(1, 20)
            if index in taken:
                with pytest.raises(DuplicateKey):
                    create_section({"title": f"step {step}", "sectionIndex": index})
            else:
                create_section({"title": f"step {step}", "sectionIndex": index})
        elif operation == "delete" and ids:
            delete_section(rng.choice(ids))
        elif operation == "reorder" and ids:
            listed = rng.sample(ids, rng.randint(0, len(ids)))
            reorder_sections(listed)
            assert sorted(current_indices()) == list(range(1, len(ids) + 1))

        indices = current_indices()
        assert len(set(indices)) == len(indices), f"duplicate index after step {step} ({operation})"
