# agro_registry/__init__.py
# Registry of rural producers, farms, crops and planted cultures backed by
# SQLAlchemy with a Redis cache-aside layer.

__version__ = "1.0.0"
