# agro_registry/api/routes/dashboard.py
# Defines API endpoints for the dashboard aggregates.

from flask import Blueprint, jsonify, current_app

from agro_registry.services.dashboard_service import DashboardService
from agro_registry.api.errors import ServiceError
from agro_registry.utils.logger import logger

dashboard_bp = Blueprint('dashboard', __name__)

def _get_dashboard_service() -> DashboardService:
    service = current_app.config.get('dashboard_service')
    if not service:
        logger.critical("DashboardService not found in application config!")
        raise ServiceError("Dashboard service is unavailable.", 503)
    return service

@dashboard_bp.route('', methods=['GET'])
def get_dashboard():
    return jsonify(_get_dashboard_service().all()), 200

@dashboard_bp.route('/por-estado', methods=['GET'])
def get_farms_by_state():
    return jsonify(_get_dashboard_service().by_state()), 200

@dashboard_bp.route('/por-cultura', methods=['GET'])
def get_farms_by_culture():
    return jsonify(_get_dashboard_service().by_culture()), 200

@dashboard_bp.route('/uso-solo', methods=['GET'])
def get_land_use():
    return jsonify(_get_dashboard_service().by_land_use()), 200
