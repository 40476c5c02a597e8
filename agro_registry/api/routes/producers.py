# agro_registry/api/routes/producers.py
# Defines API endpoints for rural producers.

from flask import Blueprint, request, jsonify, current_app

from agro_registry.services.producer_service import ProducerService
from agro_registry.api.errors import ServiceError
from agro_registry.api.routes import json_body
from agro_registry.utils.logger import logger

producers_bp = Blueprint('producers', __name__)

def _get_producer_service() -> ProducerService:
    service = current_app.config.get('producer_service')
    if not service:
        logger.critical("ProducerService not found in application config!")
        raise ServiceError("Producer service is unavailable.", 503)
    return service

@producers_bp.route('', methods=['POST'])
def create_producer():
    """Creates a producer (CPF/CNPJ validated and normalized to digits)."""
    producer = _get_producer_service().create(json_body())
    return jsonify(producer), 201

@producers_bp.route('', methods=['GET'])
def list_producers():
    page = request.args.get('page', type=int)
    limit = request.args.get('limit', type=int)
    return jsonify(_get_producer_service().list_producers(page=page, limit=limit)), 200

@producers_bp.route('/<string:producer_id>', methods=['GET'])
def get_producer(producer_id: str):
    return jsonify(_get_producer_service().get_by_id(producer_id)), 200

@producers_bp.route('/<string:producer_id>', methods=['PUT'])
def update_producer(producer_id: str):
    return jsonify(_get_producer_service().update(producer_id, json_body())), 200

@producers_bp.route('/<string:producer_id>', methods=['DELETE'])
def delete_producer(producer_id: str):
    _get_producer_service().delete(producer_id)
    return '', 204

@producers_bp.route('/search/by-name', methods=['GET'])
def search_producers_by_name():
    return jsonify(_get_producer_service().search_by_name(request.args.get('name', ''))), 200

@producers_bp.route('/search/by-document-type/<string:document_type>', methods=['GET'])
def search_producers_by_document_type(document_type: str):
    return jsonify(_get_producer_service().search_by_document_type(document_type)), 200

@producers_bp.route('/search/by-document', methods=['GET'])
def search_producers_by_document():
    """Query params: type (CPF|CNPJ) and number (formatted or digits only)."""
    service = _get_producer_service()
    return jsonify(service.search_by_document(request.args.get('type', ''), request.args.get('number', ''))), 200
