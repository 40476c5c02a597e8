# agro_registry/api/routes/crops.py
# Defines API endpoints for crops (safras).

from flask import Blueprint, request, jsonify, current_app

from agro_registry.services.crop_service import CropService
from agro_registry.api.errors import ServiceError
from agro_registry.api.routes import json_body
from agro_registry.utils.logger import logger

crops_bp = Blueprint('crops', __name__)

def _get_crop_service() -> CropService:
    service = current_app.config.get('crop_service')
    if not service:
        logger.critical("CropService not found in application config!")
        raise ServiceError("Crop service is unavailable.", 503)
    return service

@crops_bp.route('', methods=['POST'])
def create_crop():
    return jsonify(_get_crop_service().create(json_body())), 201

@crops_bp.route('', methods=['GET'])
def list_crops():
    page = request.args.get('page', type=int)
    limit = request.args.get('limit', type=int)
    return jsonify(_get_crop_service().list_crops(page=page, limit=limit)), 200

@crops_bp.route('/search/by-name', methods=['GET'])
def search_crops_by_name():
    return jsonify(_get_crop_service().search_by_name(request.args.get('name', ''))), 200

@crops_bp.route('/search/by-year', methods=['GET'])
def search_crops_by_year():
    service = _get_crop_service()
    return jsonify(service.search_by_year(request.args.get('year', ''), request.args.get('farmId'))), 200

@crops_bp.route('/search/by-farm/<string:farm_id>', methods=['GET'])
def search_crops_by_farm(farm_id: str):
    """Crops of a farm (served from the relation cache while its TTL lasts)."""
    return jsonify(_get_crop_service().find_by_farm(farm_id)), 200

@crops_bp.route('/search/by-year-range', methods=['GET'])
def search_crops_by_year_range():
    service = _get_crop_service()
    return jsonify(service.search_by_year_range(request.args.get('startYear'), request.args.get('endYear'))), 200

@crops_bp.route('/<string:crop_id>', methods=['GET'])
def get_crop(crop_id: str):
    return jsonify(_get_crop_service().get_by_id(crop_id)), 200

@crops_bp.route('/<string:crop_id>', methods=['PUT'])
def update_crop(crop_id: str):
    return jsonify(_get_crop_service().update(crop_id, json_body())), 200

@crops_bp.route('/<string:crop_id>', methods=['DELETE'])
def delete_crop(crop_id: str):
    _get_crop_service().delete(crop_id)
    return '', 204
