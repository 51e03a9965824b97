# routes/reading_plans.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
import logging

from . import error_response
from ..errors import BibleReaderError
from ..schemas.annotation_schemas import ProgressWrite
from ..services.registry import get_services
from ..utils.auth import token_required

logger = logging.getLogger(__name__)

reading_plans_bp = Blueprint('reading_plans', __name__, url_prefix='/api/reading-plans')


@reading_plans_bp.route("/", methods=['GET'])
def list_plans():
    try:
        plans = get_services().reading_plans().list_public_plans()
    except BibleReaderError as e:
        logger.error(f"Error fetching reading plans: {str(e)}")
        return error_response(e, 'Failed to load reading plans')
    return jsonify([plan.model_dump() for plan in plans])


@reading_plans_bp.route("/progress", methods=['GET'])
@token_required
def list_progress(auth):
    try:
        progress = get_services().reading_plans(auth).list_progress()
    except BibleReaderError as e:
        logger.error(f"Error fetching reading progress: {str(e)}")
        return error_response(e)
    return jsonify([p.model_dump() for p in progress])


@reading_plans_bp.route("/<plan_id>/start", methods=['POST'])
@token_required
def start_plan(auth, plan_id):
    store = get_services().reading_plans(auth)
    try:
        if store.get_plan(plan_id) is None:
            return jsonify({"error": "Reading plan not found"}), 404
        progress = store.start_plan(plan_id)
    except BibleReaderError as e:
        logger.error(f"Error starting reading plan {plan_id}: {str(e)}")
        return error_response(e, 'Failed to start reading plan')
    return jsonify(progress.model_dump()), 200


@reading_plans_bp.route("/<plan_id>/progress", methods=['POST'])
@token_required
def complete_day(auth, plan_id):
    try:
        body = ProgressWrite.model_validate(request.get_json(silent=True) or {})
    except ValidationError:
        return jsonify({"error": "day must be a non-negative integer"}), 400

    try:
        progress = get_services().reading_plans(auth).complete_day(plan_id, body.day)
    except BibleReaderError as e:
        logger.error(f"Error updating progress on plan {plan_id}: {str(e)}")
        return error_response(e, 'Failed to update reading progress')
    if progress is None:
        return jsonify({"error": "Reading plan not found"}), 404
    return jsonify(progress.model_dump()), 200
