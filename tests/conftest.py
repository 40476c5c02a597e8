"""
Configurações e fixtures compartilhadas para os testes
"""
import fnmatch
from types import SimpleNamespace

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from agro_registry.cache import CacheStore
from agro_registry.database import dispose_sqlalchemy_engine, init_sqlalchemy
from agro_registry.database.crop_repository import CropRepository
from agro_registry.database.farm_repository import FarmRepository
from agro_registry.database.planted_repository import PlantedRepository
from agro_registry.database.producer_repository import ProducerRepository
from agro_registry.services import (
    CropService,
    DashboardService,
    FarmService,
    PlantedService,
    ProducerService,
)

VALID_CPF = "123.456.789-09"
OTHER_VALID_CPF = "529.982.247-25"
VALID_CNPJ = "40.703.515/0001-72"
OTHER_VALID_CNPJ = "11.222.333/0001-81"

LIST_TTL = 3600
DASHBOARD_TTL = 600


class FakeRedis:
    """
    Cliente Redis em memória (decode_responses=True) com relógio manual para TTL.
    Implementa só o subconjunto usado pelo CacheStore.
    """

    def __init__(self):
        self.store = {}
        self.expirations = {}
        self.now = 0.0
        self.closed = False

    def _purge(self, key):
        expires_at = self.expirations.get(key)
        if expires_at is not None and expires_at <= self.now:
            self.store.pop(key, None)
            self.expirations.pop(key, None)

    def advance(self, seconds):
        self.now += seconds

    def ping(self):
        return True

    def get(self, key):
        self._purge(key)
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = value
        self.expirations.pop(key, None)
        return True

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.expirations[key] = self.now + ttl
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            self._purge(key)
            if key in self.store:
                del self.store[key]
                self.expirations.pop(key, None)
                removed += 1
        return removed

    def ttl(self, key):
        self._purge(key)
        if key not in self.store:
            return -2
        if key not in self.expirations:
            return -1
        return int(self.expirations[key] - self.now)

    def scan_iter(self, match=None):
        for key in list(self.store):
            self._purge(key)
            if key in self.store and (match is None or fnmatch.fnmatchcase(key, match)):
                yield key

    def close(self):
        self.closed = True


class FailingRedis:
    """Cliente cujo backend está sempre inacessível."""

    def _fail(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    ping = get = set = setex = delete = scan_iter = _fail

    def close(self):
        pass


@pytest.fixture
def database(tmp_path):
    """Banco SQLite temporário por teste, com o schema criado."""
    engine = init_sqlalchemy(f"sqlite:///{tmp_path / 'agro_registry.db'}")
    yield engine
    dispose_sqlalchemy_engine()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache_store(fake_redis):
    store = CacheStore(client=fake_redis)
    store.connect()
    yield store
    store.close()


def _build_services(engine, store):
    producer_repo = ProducerRepository(engine)
    farm_repo = FarmRepository(engine)
    return SimpleNamespace(
        producers=producer_repo,
        farms=farm_repo,
        crops=CropRepository(engine),
        planteds=PlantedRepository(engine),
        producer=ProducerService(producer_repo, store, LIST_TTL),
        farm=FarmService(farm_repo, producer_repo, store, LIST_TTL),
        crop=CropService(CropRepository(engine), store, LIST_TTL),
        planted=PlantedService(PlantedRepository(engine), store, LIST_TTL),
        dashboard=DashboardService(farm_repo, store, DASHBOARD_TTL),
    )


@pytest.fixture
def services(database, cache_store):
    """Repositórios e serviços ligados ao banco temporário e ao FakeRedis."""
    return _build_services(database, cache_store)


@pytest.fixture
def failing_services(database):
    """Serviços com um cache cujo backend falha em toda operação."""
    store = CacheStore(client=FailingRedis())
    store.connect()
    return _build_services(database, store)


@pytest.fixture
def make_producer(services):
    def _make(name="João da Silva", document_number=VALID_CPF, document_type="CPF"):
        return services.producer.create({
            "name": name,
            "document_number": document_number,
            "document_type": document_type,
        })
    return _make


@pytest.fixture
def make_farm(services, make_producer):
    def _make(producer_id=None, name="Fazenda Boa Vista", city="Sorriso", state="MT",
              total_area=100, arable_area=60, vegetation_area=40):
        if producer_id is None:
            producer_id = make_producer()["id"]
        return services.farm.create({
            "name": name,
            "city": city,
            "state": state,
            "total_area": total_area,
            "arable_area": arable_area,
            "vegetation_area": vegetation_area,
            "producer_id": producer_id,
        })
    return _make


@pytest.fixture
def make_crop(services, make_farm):
    def _make(farm_id=None, name="Safra Verão", year="2024"):
        if farm_id is None:
            farm_id = make_farm()["id"]
        return services.crop.create({"name": name, "year": year, "farm_id": farm_id})
    return _make


@pytest.fixture
def make_planted(services, make_crop):
    def _make(crop_id=None, name="Soja"):
        if crop_id is None:
            crop_id = make_crop()["id"]
        return services.planted.create({"name": name, "crop_id": crop_id})
    return _make


class UnreachableSession:
    """Sessão cujo banco recusa conexão em qualquer consulta ou escrita."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    get = execute = scalar = scalars = add = flush = refresh = delete = _fail

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


@pytest.fixture
def unreachable_store(monkeypatch):
    """Troca a fábrica de sessões por uma que simula o banco fora do ar."""
    monkeypatch.setattr("agro_registry.database._SessionLocalFactory", UnreachableSession)
