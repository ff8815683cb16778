# entyre_cms/models/banner.py
from entyre_cms.extensions import db
from .base import BaseModel


class Banner(BaseModel):
    __tablename__ = "banners"

    __table_args__ = (
        db.Index("ix_banners_active_created", "active", "created_at"),
    )

    title = db.Column(db.String(255), nullable=False)
    image = db.Column(db.String(1024), nullable=False, default="")
    image_url = db.Column(db.String(1024), nullable=False, default="")
    image_public_id = db.Column(db.String(512), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
