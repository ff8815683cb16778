# entyre_cms/api/v1/workflows.py
from flask import jsonify, request

from entyre_cms.extensions import db
from entyre_cms.domain.resources import clean_workflow
from entyre_cms.models.workflow import Workflow
from entyre_cms.normalizers.content import normalize_workflow
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import apply_fields, load_or_404
from . import v1_bp


@v1_bp.route("/workflows", methods=["GET"])
def list_workflows():
    workflows = Workflow.query.order_by(Workflow.created_at.desc()).all()
    return jsonify([normalize_workflow(w) for w in workflows]), 200


@v1_bp.route("/workflows/<workflow_id>", methods=["GET"])
def get_workflow(workflow_id):
    return jsonify(normalize_workflow(load_or_404(Workflow, workflow_id, "workflow"))), 200


@v1_bp.route("/workflows", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_workflow():
    cleaned = clean_workflow(request.get_json(silent=True))

    workflow = Workflow()
    with transactional():
        apply_fields(workflow, cleaned)
        db.session.add(workflow)
        db.session.flush()

        log_action(
            action="workflow.create",
            entity_type="workflow",
            entity_id=workflow.id,
            payload={"name": workflow.name, "nodes": len(workflow.nodes)},
        )

    return jsonify(normalize_workflow(workflow)), 201


@v1_bp.route("/workflows/<workflow_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_workflow(workflow_id):
    workflow = load_or_404(Workflow, workflow_id, "workflow")
    cleaned = clean_workflow(request.get_json(silent=True), partial=True)

    with transactional():
        changed = apply_fields(workflow, cleaned)
        log_action(
            action="workflow.update",
            entity_type="workflow",
            entity_id=workflow.id,
            payload={"fields": changed},
        )

    return jsonify(normalize_workflow(workflow)), 200


@v1_bp.route("/workflows/<workflow_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_workflow(workflow_id):
    workflow = load_or_404(Workflow, workflow_id, "workflow")
    snapshot = normalize_workflow(workflow)

    with transactional():
        db.session.delete(workflow)
        log_action(
            action="workflow.delete",
            entity_type="workflow",
            entity_id=snapshot["id"],
            payload={"name": snapshot["name"]},
        )

    return jsonify({"message": "Workflow deleted successfully", "workflow": snapshot}), 200
