# entyre_cms/models/workflow.py
from entyre_cms.extensions import db
from .base import BaseModel


class Workflow(BaseModel):
    """A pathway diagram: node ids, styled connections and node positions."""

    __tablename__ = "workflows"

    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(100), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")

    nodes = db.Column(db.JSON, nullable=False, default=list)
    connections = db.Column(db.JSON, nullable=False, default=list)
    node_positions = db.Column(db.JSON, nullable=False, default=dict)
