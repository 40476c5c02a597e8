# agro_registry/api/routes/farms.py
# Defines API endpoints for farms.

from flask import Blueprint, request, jsonify, current_app

from agro_registry.services.farm_service import FarmService
from agro_registry.api.errors import ServiceError
from agro_registry.api.routes import json_body
from agro_registry.utils.logger import logger

farms_bp = Blueprint('farms', __name__)

def _get_farm_service() -> FarmService:
    service = current_app.config.get('farm_service')
    if not service:
        logger.critical("FarmService not found in application config!")
        raise ServiceError("Farm service is unavailable.", 503)
    return service

@farms_bp.route('', methods=['POST'])
def create_farm():
    """Creates a farm. arable_area + vegetation_area must not exceed total_area."""
    return jsonify(_get_farm_service().create(json_body())), 201

@farms_bp.route('', methods=['GET'])
def list_farms():
    page = request.args.get('page', type=int)
    limit = request.args.get('limit', type=int)
    return jsonify(_get_farm_service().list_farms(page=page, limit=limit)), 200

@farms_bp.route('/search/by-name', methods=['GET'])
def search_farms_by_name():
    return jsonify(_get_farm_service().search_by_name(request.args.get('name', ''))), 200

@farms_bp.route('/search/by-state-city', methods=['GET'])
def search_farms_by_state_city():
    service = _get_farm_service()
    return jsonify(service.search_by_state(request.args.get('state', ''), request.args.get('city'))), 200

@farms_bp.route('/<string:farm_id>', methods=['GET'])
def get_farm(farm_id: str):
    return jsonify(_get_farm_service().get_by_id(farm_id)), 200

@farms_bp.route('/<string:farm_id>', methods=['PUT'])
def update_farm(farm_id: str):
    return jsonify(_get_farm_service().update(farm_id, json_body())), 200

@farms_bp.route('/<string:farm_id>', methods=['DELETE'])
def delete_farm(farm_id: str):
    _get_farm_service().delete(farm_id)
    return '', 204
