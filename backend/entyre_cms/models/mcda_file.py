# entyre_cms/models/mcda_file.py
from entyre_cms.extensions import db
from .base import BaseModel


class McdaFile(BaseModel):
    """An uploaded multi-criteria decision analysis input, kept as a raw file."""

    __tablename__ = "mcda_files"

    file_url = db.Column(db.String(1024), nullable=False)
    file_public_id = db.Column(db.String(512), nullable=True)
    original_name = db.Column(db.String(255), nullable=False, default="")
