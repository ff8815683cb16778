# entyre_cms/models/section.py
from entyre_cms.extensions import db
from .base import BaseModel

# canonical document key -> column
DOCUMENT_COLUMNS = {
    "sectionIndex": "section_index",
    "title": "title",
    "content": "content",
    "type": "type",
    "layout": "layout",
    "typography": "typography",
    "animation": "animation",
    "displayConditions": "display_conditions",
    "seo": "seo",
    "payload": "payload",
    "isVisible": "is_visible",
    "customCSS": "custom_css",
    "customJS": "custom_js",
    "updatedAt": "updated_at",
}


class Section(BaseModel):
    """A home page content section. Type-specific data lives in ``payload``."""

    __tablename__ = "sections"

    __table_args__ = (
        db.UniqueConstraint("section_index", name="uq_sections_section_index"),
    )

    section_index = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    type = db.Column(db.String(50), nullable=False, default="text", index=True)

    layout = db.Column(db.JSON, nullable=False, default=dict)
    typography = db.Column(db.JSON, nullable=False, default=dict)
    animation = db.Column(db.JSON, nullable=False, default=dict)
    display_conditions = db.Column(db.JSON, nullable=False, default=dict)
    seo = db.Column(db.JSON, nullable=False, default=dict)

    # Only the fields owned by ``type``
    payload = db.Column(db.JSON, nullable=False, default=dict)

    is_visible = db.Column(db.Boolean, nullable=False, default=True, index=True)
    custom_css = db.Column(db.Text, nullable=False, default="")
    custom_js = db.Column(db.Text, nullable=False, default="")

    def to_document(self):
        """
        Stored state in canonical document form, the input for validation and
        normalization on update. Payload fields are also exposed at the top
        level, where request bodies carry them.
        """
        document = {key: getattr(self, column) for key, column in DOCUMENT_COLUMNS.items()}
        document.update(self.payload or {})
        return document

    def apply_document(self, document):
        for key, column in DOCUMENT_COLUMNS.items():
            if key in document:
                setattr(self, column, document[key])
