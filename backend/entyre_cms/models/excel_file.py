# entyre_cms/models/excel_file.py
from entyre_cms.extensions import db
from .base import BaseModel

CATEGORIES = ("comparison", "analysis", "visualization", "other")
DEFAULT_CATEGORY = "analysis"


class ExcelFile(BaseModel):
    __tablename__ = "excel_files"

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    category = db.Column(db.String(50), nullable=False, default=DEFAULT_CATEGORY, index=True)

    file_url = db.Column(db.String(1024), nullable=False)
    file_public_id = db.Column(db.String(512), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    file_size = db.Column(db.Integer, nullable=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    tags = db.Column(db.JSON, nullable=False, default=list)

    # sheetNames, columnInfo, rowCount, hasWeights, lastProcessed
    file_metadata = db.Column("metadata", db.JSON, nullable=False, default=dict)

    scenario_id = db.Column(db.String(20), nullable=True, index=True)
    scenario_type = db.Column(db.String(20), nullable=True, index=True)
    scope_type = db.Column(db.String(20), nullable=True, index=True)
