import pytest

from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.domain.sections.validator import UPDATE, validate_section_payload


def errors_for(payload, **kwargs):
    with pytest.raises(ValidationError) as excinfo:
        validate_section_payload(payload, **kwargs)
    return excinfo.value.details


def test_minimal_create_defaults_type_to_text():
    data = validate_section_payload({"title": "Hello"})
    assert data["type"] == "text"


def test_title_is_required_on_create():
    assert "title is required" in errors_for({"content": "x"})
    assert "title is required" in errors_for({"title": "   "})


def test_body_must_be_an_object():
    assert errors_for(["not", "an", "object"]) == ["Request body must be a JSON object"]


def test_card_requires_button_text_and_link():
    details = errors_for({"title": "Hi", "type": "card"})
    assert "cardButtonText is required for card sections" in details
    assert "cardButtonLink is required for card sections" in details


def test_errors_are_collected_not_fail_fast():
    details = errors_for({
        "type": "nope",
        "sectionIndex": "abc",
        "layout": {"columns": 9, "padding": "huge"},
        "animation": {"delay": -1},
    })
    assert "title is required" in details
    assert any(d.startswith("type must be one of") for d in details)
    assert "sectionIndex must be an integer" in details
    assert "layout.columns must be an integer between 1 and 4" in details
    assert any(d.startswith("layout.padding must be one of") for d in details)
    assert "animation.delay must be a non-negative integer" in details


def test_sub_objects_must_be_objects():
    details = errors_for({"title": "x", "layout": [], "seo": "text"})
    assert "layout must be an object" in details
    assert "seo must be an object" in details


def test_section_index_rejects_bools_and_negatives():
    assert "sectionIndex must be an integer" in errors_for({"title": "x", "sectionIndex": True})
    assert "sectionIndex must not be negative" in errors_for({"title": "x", "sectionIndex": -2})


def test_wire_encoded_booleans_are_accepted():
    data = validate_section_payload({"title": "x", "isVisible": "false"})
    assert data["isVisible"] == "false"
    assert "isVisible must be a boolean" in errors_for({"title": "x", "isVisible": "maybe"})


def test_array_items_are_validated_one_by_one():
    details = errors_for({
        "title": "Steps",
        "type": "process-steps",
        "steps": [{"title": "One"}, {"description": "no title"}, "oops"],
    })
    assert details == ["steps[1].title is required", "steps[2] must be an object"]


def test_array_field_must_be_an_array():
    assert "features must be an array" in errors_for(
        {"title": "x", "type": "features-grid", "features": {"title": "a"}}
    )


def test_hero_button_style_is_checked():
    details = errors_for({
        "title": "Hero",
        "type": "hero",
        "heroButtons": [{"text": "Go", "link": "/go", "style": "loud"}],
    })
    assert details == ["heroButtons[0].style must be one of: primary, secondary, outline, ghost"]


def test_display_condition_dates_must_be_ordered():
    details = errors_for({
        "title": "x",
        "displayConditions": {"startDate": "2025-05-01", "endDate": "2025-01-01"},
    })
    assert details == ["displayConditions.startDate must not be after endDate"]


def test_video_platform_choice():
    assert "videoPlatform must be one of: youtube, vimeo, custom" in errors_for(
        {"title": "x", "type": "video", "videoUrl": "https://v", "videoPlatform": "tiktok"}
    )


def test_update_checks_only_supplied_fields():
    existing = {"type": "text", "title": "Old"}
    assert validate_section_payload({"content": "new"}, mode=UPDATE, existing=existing) == {
        "content": "new",
        "type": "text",
    }


def test_update_uses_existing_type_and_merged_view():
    existing = {"type": "card", "cardButtonText": "Read", "cardButtonLink": "/read"}
    data = validate_section_payload({"cardButtonLink": "/more"}, mode=UPDATE, existing=existing)
    assert data["type"] == "card"

    details = errors_for({"cardButtonText": ""}, mode=UPDATE, existing=existing)
    assert details == ["cardButtonText is required for card sections"]


def test_type_switch_does_not_reuse_other_types_values():
    existing = {"type": "text", "cardButtonText": "stale"}
    details = errors_for({"type": "card", "cardButtonLink": "/x"}, mode=UPDATE, existing=existing)
    assert details == ["cardButtonText is required for card sections"]


def test_update_rejects_empty_title():
    assert "title is required" in errors_for({"title": ""}, mode=UPDATE, existing={"type": "text"})
