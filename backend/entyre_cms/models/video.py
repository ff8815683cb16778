# entyre_cms/models/video.py
from entyre_cms.extensions import db
from .base import BaseModel


class Video(BaseModel):
    __tablename__ = "videos"

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    video_url = db.Column(db.String(1024), nullable=False)
    thumbnail = db.Column(db.String(1024), nullable=False, default="")
    thumbnail_public_id = db.Column(db.String(512), nullable=True)
