# entyre_cms/models/article.py
from entyre_cms.extensions import db
from .base import BaseModel


class Article(BaseModel):
    __tablename__ = "articles"

    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text, nullable=False, default="")
    content = db.Column(db.Text, nullable=False, default="")
    image_url = db.Column(db.String(1024), nullable=False, default="")
    image_public_id = db.Column(db.String(512), nullable=True)
