# entyre_cms/api/v1/articles.py
from flask import jsonify

from entyre_cms.extensions import db
from entyre_cms.domain.resources import clean_article
from entyre_cms.models.article import Article
from entyre_cms.normalizers.content import normalize_article
from entyre_cms.services.media import (
    ARTICLE_FOLDER,
    IMAGE_EXTENSIONS,
    check_extension,
    discard_media,
    discard_on_error,
    get_media_store,
)
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import apply_fields, load_or_404, request_data, uploaded_file
from . import v1_bp


def _upload_image():
    file = uploaded_file("file", "image")
    if not file:
        return None
    check_extension(file, IMAGE_EXTENSIONS)
    return get_media_store().upload(file, ARTICLE_FOLDER)


@v1_bp.route("/articles", methods=["GET"])
def list_articles():
    articles = Article.query.order_by(Article.created_at.desc()).all()
    return jsonify([normalize_article(a) for a in articles]), 200


@v1_bp.route("/articles/<article_id>", methods=["GET"])
def get_article(article_id):
    return jsonify(normalize_article(load_or_404(Article, article_id, "article"))), 200


@v1_bp.route("/articles", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_article():
    cleaned = clean_article(request_data())
    upload = _upload_image()

    article = Article()
    with discard_on_error(upload):
        with transactional():
            apply_fields(article, cleaned)
            if upload:
                article.image_url = upload["url"]
                article.image_public_id = upload["publicId"]
            db.session.add(article)
            db.session.flush()

            log_action(
                action="article.create",
                entity_type="article",
                entity_id=article.id,
                payload={"title": article.title},
            )

    return jsonify(normalize_article(article)), 201


@v1_bp.route("/articles/<article_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_article(article_id):
    article = load_or_404(Article, article_id, "article")
    cleaned = clean_article(request_data(), partial=True)
    upload = _upload_image()
    replaced = article.image_public_id if upload else None

    with discard_on_error(upload):
        with transactional():
            changed = apply_fields(article, cleaned)
            if upload:
                article.image_url = upload["url"]
                article.image_public_id = upload["publicId"]
                changed.append("image")

            log_action(
                action="article.update",
                entity_type="article",
                entity_id=article.id,
                payload={"fields": changed},
            )

    discard_media(replaced)
    return jsonify(normalize_article(article)), 200


@v1_bp.route("/articles/<article_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_article(article_id):
    article = load_or_404(Article, article_id, "article")
    snapshot = normalize_article(article)

    with transactional():
        db.session.delete(article)
        log_action(
            action="article.delete",
            entity_type="article",
            entity_id=snapshot["id"],
            payload={"title": snapshot["title"]},
        )

    discard_media(snapshot["imagePublicId"])
    return jsonify({"message": "Article deleted successfully", "article": snapshot}), 200
