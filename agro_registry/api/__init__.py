# agro_registry/api/__init__.py
# Initializes the API layer and registers blueprints.
# Route modules are imported lazily; they depend on services that import agro_registry.api.errors.

from flask import Flask

from agro_registry.utils.logger import logger


def _blueprints():
    from .routes.producers import producers_bp
    from .routes.farms import farms_bp
    from .routes.crops import crops_bp
    from .routes.planteds import planteds_bp
    from .routes.dashboard import dashboard_bp

    # Adicionar novos blueprints aqui
    return [
        (producers_bp, '/api/producers'),
        (farms_bp, '/api/farms'),
        (crops_bp, '/api/crops'),
        (planteds_bp, '/api/planteds'),
        (dashboard_bp, '/api/dashboard'),
    ]

def register_blueprints(app: Flask):
    """
    Registers all defined blueprints with the Flask application.

    Args:
        app: The Flask application instance.
    """
    logger.info("Registering API blueprints...")
    for bp, prefix in _blueprints():
        app.register_blueprint(bp, url_prefix=prefix)
        logger.debug(f"Blueprint '{bp.name}' registered with prefix '{prefix}'.")
    logger.info("All API blueprints registered.")

__all__ = ["register_blueprints"]
