from typing import Optional
from flask import Flask, jsonify
from flask_cors import CORS
import atexit
import sys
from sqlalchemy.exc import SQLAlchemyError

from agro_registry.config import Config
from agro_registry.api import register_blueprints
from agro_registry.api.errors import register_error_handlers, ConfigurationError, DatabaseError, InfrastructureError
from agro_registry.cache import CacheStore
from agro_registry.database import (
    get_db_session,
    init_sqlalchemy,
    dispose_sqlalchemy_engine,
)
from agro_registry.utils.logger import logger, configure_logger

from agro_registry.database.producer_repository import ProducerRepository
from agro_registry.database.farm_repository import FarmRepository
from agro_registry.database.crop_repository import CropRepository
from agro_registry.database.planted_repository import PlantedRepository

from agro_registry.services import (
    ProducerService,
    FarmService,
    CropService,
    PlantedService,
    DashboardService,
)

def create_app(config_object: Config, cache_store: Optional[CacheStore] = None) -> Flask:
    """
    Factory function to create and configure the Flask application.

    Args:
        config_object: The configuration object for the application.
        cache_store: Optional CacheStore to share with the services. When omitted,
            one is built from the Redis settings and connected here.

    Returns:
        The configured Flask application instance.
    """
    app = Flask("Agro-Registry")
    app.config.from_object(config_object)

    # --- Logging ---
    configure_logger(config_object.LOG_LEVEL)
    logger.info("Iniciando a aplicação Flask para o Agro-Registry.")
    logger.info(f"Modo de depuração: {app.config.get('APP_DEBUG')}")

    # --- Secret Key Check ---
    if not app.config.get('SECRET_KEY') or app.config.get('SECRET_KEY') == 'default_secret_key_change_me_in_env':
            logger.critical("ALERTA CRÍTICO DE SEGURANÇA: SECRET_KEY não está definida ou está usando o valor padrão!")
            if not app.config.get('APP_DEBUG', False):
                raise ConfigurationError("SECRET_KEY deve ser configurada com um valor seguro e único em produção.")
            else:
                logger.warning("Usando SECRET_KEY padrão/insegura no modo de depuração.")

    # --- CORS Configuration ---
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    logger.info("CORS configurado para permitir todas as origens (Atualizar para produção).")

    # --- Database Initialization (SQLAlchemy) ---
    db_engine = None
    try:
        db_uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if not db_uri:
             raise ConfigurationError("SQLALCHEMY_DATABASE_URI não está configurado.")

        db_engine = init_sqlalchemy(db_uri)
        logger.info("Motor SQLAlchemy e fábrica de sessões inicializados com sucesso.")

        atexit.register(dispose_sqlalchemy_engine)
        logger.debug("Registrado descarte do motor SQLAlchemy para saída da aplicação.")

    except (DatabaseError, ConfigurationError, InfrastructureError, SQLAlchemyError) as db_init_err:
        logger.critical(f"Falha ao inicializar o banco de dados: {db_init_err}", exc_info=True)
        sys.exit(1)

    # --- Cache (Redis) ---
    if cache_store is None:
        cache_store = CacheStore.from_config(config_object)
        atexit.register(cache_store.close)
    if not cache_store.connect():
        logger.warning("Cache indisponível: operações seguirão direto para o banco de dados.")
    app.config['cache_store'] = cache_store

    # --- Dependency Injection (Service Instantiation) ---
    logger.info("Instanciando serviços...")
    try:
        producer_repo = ProducerRepository(db_engine)
        farm_repo = FarmRepository(db_engine)
        crop_repo = CropRepository(db_engine)
        planted_repo = PlantedRepository(db_engine)

        list_ttl = config_object.CACHE_LIST_TTL_SECONDS
        app.config['producer_service'] = ProducerService(producer_repo, cache_store, list_ttl)
        app.config['farm_service'] = FarmService(farm_repo, producer_repo, cache_store, list_ttl)
        app.config['crop_service'] = CropService(crop_repo, cache_store, list_ttl)
        app.config['planted_service'] = PlantedService(planted_repo, cache_store, list_ttl)
        app.config['dashboard_service'] = DashboardService(
            farm_repo, cache_store, config_object.DASHBOARD_CACHE_TTL_SECONDS
        )

        logger.info("Serviços instanciados e adicionados à configuração do aplicativo.")

    except Exception as service_init_err:
        logger.critical(f"Falha ao instanciar serviços: {service_init_err}", exc_info=True)
        sys.exit(1)

    # --- Register Blueprints (API Routes) ---
    register_blueprints(app)

    # --- Register Error Handlers ---
    register_error_handlers(app)

    # --- Simple Health Check Endpoint ---
    @app.route('/health', methods=['GET'])
    def health_check():
        db_status = "ok"
        db_error = None
        try:
             with get_db_session():
                 pass
        except Exception as e:
             logger.error(f"Verificação de saúde da sessão do banco de dados falhou: {e}")
             db_status = "error"
             db_error = str(e)

        # Cache indisponível não derruba a aplicação.
        cache_status = "ok" if cache_store.ping() else "unavailable"

        return jsonify({
            "status": "ok" if db_status == "ok" else "error",
            "database": db_status,
            "database_error": db_error,
            "cache": cache_status,
        }), 200 if db_status == "ok" else 503

    logger.info("Aplicação Agro-Registry configurada com sucesso.")
    return app
