# entyre_cms/domain/sections/registry.py
"""
Section type registry.

Single source of truth for which type-specific fields belong to which
section ``type``. Everything else (validator, normalizer, serializer) reads
from this table, so adding a content kind means adding one entry to
``SECTION_TYPES``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


DEFAULT_SECTION_TYPE = "text"

COMMON_REQUIRED_FIELDS: Tuple[str, ...] = ("title",)
COMMON_OPTIONAL_FIELDS: Tuple[str, ...] = (
    "sectionIndex",
    "content",
    "type",
    "layout",
    "typography",
    "animation",
    "displayConditions",
    "seo",
    "isVisible",
    "customCSS",
    "customJS",
)

# Value a type-specific field holds when its owning type is not active.
PAYLOAD_ZERO_VALUES: Dict[str, Any] = {
    "cardButtonText": "",
    "cardButtonLink": "",
    "cardButtonStyle": "",
    "heroSubtitle": "",
    "heroImage": "",
    "heroButtons": [],
    "features": [],
    "stats": [],
    "steps": [],
    "images": [],
    "videoUrl": "",
    "videoThumbnail": "",
    "videoPlatform": "",
    "accordionItems": [],
    "timelineItems": [],
    "banners": [],
}

# Value a type-specific field takes when its owning type is active but the
# caller did not supply it.
PAYLOAD_DEFAULTS: Dict[str, Any] = {
    **PAYLOAD_ZERO_VALUES,
    "cardButtonStyle": "primary",
    "videoPlatform": "youtube",
}

# Shape of the entries held by array payload fields.
ITEM_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "heroButtons": {"text": "", "link": "", "style": "primary", "external": False},
    "features": {"title": "", "description": "", "icon": "", "link": "", "linkText": ""},
    "stats": {"number": "", "label": "", "description": "", "color": ""},
    "steps": {"stepNumber": "", "title": "", "description": "", "icon": ""},
    "images": {"url": "", "alt": "", "caption": "", "link": "", "publicId": ""},
    "accordionItems": {"title": "", "content": "", "defaultOpen": False},
    "timelineItems": {"date": "", "title": "", "description": "", "image": ""},
    "banners": {"title": "", "image": "", "link": "", "caption": "", "publicId": ""},
}


@dataclass(frozen=True)
class SectionTypeSpec:
    name: str
    label: str
    scalar_fields: Tuple[str, ...] = ()
    array_field: Optional[str] = None
    required: Tuple[str, ...] = ()
    item_required: Tuple[str, ...] = field(default=())

    @property
    def payload_fields(self) -> Tuple[str, ...]:
        if self.array_field:
            return self.scalar_fields + (self.array_field,)
        return self.scalar_fields


_TYPES: List[SectionTypeSpec] = [
    SectionTypeSpec("text", "Text Section"),
    SectionTypeSpec("key-value", "Key-Value Section"),
    SectionTypeSpec("image", "Image Section"),
    SectionTypeSpec(
        "card",
        "Card Section",
        scalar_fields=("cardButtonText", "cardButtonLink", "cardButtonStyle"),
        required=("cardButtonText", "cardButtonLink"),
    ),
    SectionTypeSpec(
        "hero",
        "Hero Banner",
        scalar_fields=("heroSubtitle", "heroImage"),
        array_field="heroButtons",
        item_required=("text", "link"),
    ),
    SectionTypeSpec(
        "features-grid",
        "Features Grid",
        array_field="features",
        item_required=("title", "description"),
    ),
    SectionTypeSpec(
        "stats",
        "Statistics",
        array_field="stats",
        item_required=("number", "label"),
    ),
    SectionTypeSpec("cta-section", "Call to Action"),
    SectionTypeSpec(
        "process-steps",
        "Process Steps",
        array_field="steps",
        item_required=("title",),
    ),
    SectionTypeSpec("testimonial", "Testimonials"),
    SectionTypeSpec(
        "gallery",
        "Image Gallery",
        array_field="images",
        item_required=("url",),
    ),
    SectionTypeSpec(
        "video",
        "Video Embed",
        scalar_fields=("videoUrl", "videoThumbnail", "videoPlatform"),
        required=("videoUrl",),
    ),
    SectionTypeSpec(
        "accordion",
        "Accordion",
        array_field="accordionItems",
        item_required=("title", "content"),
    ),
    SectionTypeSpec(
        "timeline",
        "Timeline",
        array_field="timelineItems",
        item_required=("date", "title"),
    ),
    SectionTypeSpec("pricing", "Pricing Table"),
    SectionTypeSpec("team", "Team Members"),
    SectionTypeSpec("contact-form", "Contact Form"),
    SectionTypeSpec("newsletter", "Newsletter Signup"),
    SectionTypeSpec("social-links", "Social Links"),
    SectionTypeSpec("custom-html", "Custom HTML"),
    SectionTypeSpec(
        "banner-carousel",
        "Banner Carousel",
        array_field="banners",
        item_required=("image",),
    ),
]

SECTION_TYPES: Dict[str, SectionTypeSpec] = {spec.name: spec for spec in _TYPES}

# Reverse index: type-specific field -> owning type
FIELD_OWNERS: Dict[str, str] = {
    name: spec.name for spec in _TYPES for name in spec.payload_fields
}

PAYLOAD_FIELDS: Tuple[str, ...] = tuple(PAYLOAD_ZERO_VALUES)


def is_section_type(value: Any) -> bool:
    return isinstance(value, str) and value in SECTION_TYPES


def get_type_spec(section_type: str) -> SectionTypeSpec:
    try:
        return SECTION_TYPES[section_type]
    except KeyError:
        raise KeyError(f"Unknown section type: {section_type}") from None


def fields_for(section_type: str) -> Dict[str, Any]:
    """
    Describe the fields a section of ``section_type`` accepts.

    Returns ``{"required": [...], "optional": [...], "array_field": name|None}``.
    """
    spec = get_type_spec(section_type)
    required = list(COMMON_REQUIRED_FIELDS) + list(spec.required)
    optional = list(COMMON_OPTIONAL_FIELDS) + [
        name for name in spec.payload_fields if name not in spec.required
    ]
    return {
        "required": required,
        "optional": optional,
        "array_field": spec.array_field,
    }


def describe_types() -> List[Dict[str, Any]]:
    """Registry table in a JSON-friendly shape, for editors building forms."""
    return [
        {
            "type": spec.name,
            "label": spec.label,
            **fields_for(spec.name),
            "itemRequired": list(spec.item_required),
        }
        for spec in _TYPES
    ]
