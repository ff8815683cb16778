# entyre_cms/normalizers/content.py
"""API shapes for articles, banners, videos, workflows, Excel and MCDA files."""
from .dates import iso


def _timestamps(obj):
    return {
        "createdAt": iso(obj.created_at),
        "updatedAt": iso(obj.updated_at),
    }


def normalize_article(article):
    return {
        "id": article.id,
        "_id": article.id,
        "title": article.title,
        "summary": article.summary or "",
        "content": article.content or "",
        "imageUrl": article.image_url or "",
        "imagePublicId": article.image_public_id,
        **_timestamps(article),
    }


def normalize_banner(banner):
    return {
        "id": banner.id,
        "_id": banner.id,
        "title": banner.title,
        "image": banner.image or "",
        "imageUrl": banner.image_url or "",
        "imagePublicId": banner.image_public_id,
        "active": bool(banner.active),
        **_timestamps(banner),
    }


def normalize_video(video):
    return {
        "id": video.id,
        "_id": video.id,
        "title": video.title,
        "description": video.description or "",
        "videoUrl": video.video_url,
        "thumbnail": video.thumbnail or "",
        "thumbnailPublicId": video.thumbnail_public_id,
        **_timestamps(video),
    }


def normalize_workflow(workflow):
    return {
        "id": workflow.id,
        "_id": workflow.id,
        "name": workflow.name,
        "status": workflow.status or "",
        "description": workflow.description or "",
        "nodes": list(workflow.nodes or []),
        "connections": list(workflow.connections or []),
        "nodePositions": dict(workflow.node_positions or {}),
        **_timestamps(workflow),
    }


def normalize_excel_file(excel_file):
    return {
        "id": excel_file.id,
        "_id": excel_file.id,
        "title": excel_file.title,
        "description": excel_file.description or "",
        "category": excel_file.category,
        "fileUrl": excel_file.file_url,
        "filePublicId": excel_file.file_public_id,
        "originalName": excel_file.original_name,
        "fileSize": excel_file.file_size,
        "isActive": bool(excel_file.is_active),
        "tags": list(excel_file.tags or []),
        "metadata": dict(excel_file.file_metadata or {}),
        "scenarioId": excel_file.scenario_id,
        "scenarioType": excel_file.scenario_type,
        "scopeType": excel_file.scope_type,
        **_timestamps(excel_file),
    }


def normalize_mcda_file(mcda_file):
    return {
        "id": mcda_file.id,
        "_id": mcda_file.id,
        "fileUrl": mcda_file.file_url,
        "filePublicId": mcda_file.file_public_id,
        "originalName": mcda_file.original_name or "",
        **_timestamps(mcda_file),
    }
