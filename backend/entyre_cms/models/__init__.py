# entyre_cms/models/__init__.py
from .user import User
from .section import Section
from .article import Article
from .banner import Banner
from .video import Video
from .workflow import Workflow
from .excel_file import ExcelFile
from .mcda_file import McdaFile
from .audit_log import AuditLog

__all__ = [
    "User",
    "Section",
    "Article",
    "Banner",
    "Video",
    "Workflow",
    "ExcelFile",
    "McdaFile",
    "AuditLog",
]
