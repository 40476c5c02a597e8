# agro_registry/api/routes/planteds.py
# Defines API endpoints for planted cultures.

from flask import Blueprint, request, jsonify, current_app

from agro_registry.services.planted_service import PlantedService
from agro_registry.api.errors import ServiceError
from agro_registry.api.routes import json_body
from agro_registry.utils.logger import logger

planteds_bp = Blueprint('planteds', __name__)

def _get_planted_service() -> PlantedService:
    service = current_app.config.get('planted_service')
    if not service:
        logger.critical("PlantedService not found in application config!")
        raise ServiceError("Planted service is unavailable.", 503)
    return service

@planteds_bp.route('', methods=['POST'])
def create_planted():
    return jsonify(_get_planted_service().create(json_body())), 201

@planteds_bp.route('', methods=['GET'])
def list_planteds():
    page = request.args.get('page', type=int)
    limit = request.args.get('limit', type=int)
    return jsonify(_get_planted_service().list_planteds(page=page, limit=limit)), 200

@planteds_bp.route('/by-crop', methods=['GET'])
def list_planteds_by_crop():
    return jsonify(_get_planted_service().find_by_crop(request.args.get('cropId', ''))), 200

@planteds_bp.route('/<string:planted_id>', methods=['GET'])
def get_planted(planted_id: str):
    return jsonify(_get_planted_service().get_by_id(planted_id)), 200

@planteds_bp.route('/<string:planted_id>', methods=['PUT'])
def update_planted(planted_id: str):
    return jsonify(_get_planted_service().update(planted_id, json_body())), 200

@planteds_bp.route('/<string:planted_id>', methods=['DELETE'])
def delete_planted(planted_id: str):
    _get_planted_service().delete(planted_id)
    return '', 204
