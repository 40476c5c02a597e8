"""
Testes do ProducerService: validação de documento e protocolo cache-aside
"""
import json

import pytest

from agro_registry.api.errors import NotFoundError, ValidationError, ValidationKind
from agro_registry.database import get_db_session

from conftest import OTHER_VALID_CNPJ, OTHER_VALID_CPF, VALID_CNPJ, VALID_CPF


class TestCreate:
    def test_document_is_normalized(self, make_producer):
        producer = make_producer(document_number=VALID_CPF)
        assert producer["document_number"] == "12345678909"
        assert producer["document_type"] == "CPF"
        assert producer["farm_count"] == 0
        assert producer["farms"] == []

    def test_cnpj_accepted(self, make_producer):
        producer = make_producer(name="Agro LTDA", document_number=VALID_CNPJ, document_type="CNPJ")
        assert producer["document_number"] == "40703515000172"

    def test_create_writes_per_id_key_without_ttl(self, make_producer, fake_redis):
        producer = make_producer()
        key = f"producer:{producer['id']}"
        assert json.loads(fake_redis.store[key]) == producer
        assert fake_redis.ttl(key) == -1

    def test_invalid_checksum_rejected_before_persisting(self, services, fake_redis):
        with pytest.raises(ValidationError) as exc:
            services.producer.create({"name": "X", "document_number": "123.456.789-00", "document_type": "CPF"})
        assert exc.value.kind is ValidationKind.INVALID_DOCUMENT
        assert services.producer.list_producers() == []
        assert fake_redis.store == {}

    def test_repeated_digits_rejected(self, services):
        with pytest.raises(ValidationError) as exc:
            services.producer.create({"name": "X", "document_number": "111.111.111-11", "document_type": "CPF"})
        assert exc.value.kind is ValidationKind.INVALID_DOCUMENT

    def test_unknown_document_type_rejected(self, services):
        with pytest.raises(ValidationError) as exc:
            services.producer.create({"name": "X", "document_number": VALID_CPF, "document_type": "RG"})
        assert exc.value.kind is ValidationKind.INVALID_DOCUMENT

    def test_duplicate_document_with_different_formatting(self, make_producer):
        make_producer(document_number="123.456.789-09")
        with pytest.raises(ValidationError) as exc:
            make_producer(name="Outro", document_number="12345678909")
        assert exc.value.kind is ValidationKind.DUPLICATE_DOCUMENT

    def test_missing_fields(self, services):
        with pytest.raises(ValidationError) as exc:
            services.producer.create({"name": "  ", "document_type": "CPF"})
        assert exc.value.kind is ValidationKind.MISSING_REQUIRED_FIELD
        assert set(exc.value.payload["fields"]) == {"name", "document_number"}


class TestRead:
    def test_read_after_write_is_identical(self, services, make_producer):
        created = make_producer()
        assert services.producer.get_by_id(created["id"]) == created

    def test_miss_loads_from_store_and_populates_cache(self, services, make_producer, fake_redis):
        created = make_producer()
        key = f"producer:{created['id']}"
        fake_redis.delete(key)

        snapshot = services.producer.read_snapshot(created["id"])
        assert snapshot.from_cache is False
        assert snapshot.data == created
        assert key in fake_redis.store

        assert services.producer.read_snapshot(created["id"]).from_cache is True

    def test_hit_is_returned_as_is(self, services, make_producer, fake_redis):
        created = make_producer()
        key = f"producer:{created['id']}"
        fake_redis.store[key] = json.dumps({**created, "name": "Somente no cache"})
        assert services.producer.get_by_id(created["id"])["name"] == "Somente no cache"

    def test_unknown_id(self, services):
        with pytest.raises(NotFoundError):
            services.producer.get_by_id("does-not-exist")

    def test_producer_response_embeds_farms(self, services, make_producer, make_farm, fake_redis):
        producer = make_producer()
        make_farm(producer_id=producer["id"], name="B")
        make_farm(producer_id=producer["id"], name="A")
        fake_redis.delete(f"producer:{producer['id']}")

        loaded = services.producer.get_by_id(producer["id"])
        assert loaded["farm_count"] == 2
        assert [farm["name"] for farm in loaded["farms"]] == ["A", "B"]


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, services, make_producer, fake_redis):
        created = make_producer()
        updated = services.producer.update(created["id"], {"name": "Maria"})
        assert updated["name"] == "Maria"
        assert updated["document_number"] == created["document_number"]
        assert json.loads(fake_redis.store[f"producer:{created['id']}"]) == updated

    def test_same_document_on_self_is_allowed(self, services, make_producer):
        created = make_producer()
        updated = services.producer.update(created["id"], {"document_number": "123.456.789-09"})
        assert updated["document_number"] == "12345678909"

    def test_document_of_other_producer_rejected(self, services, make_producer):
        make_producer(document_number=VALID_CPF)
        other = make_producer(name="Outro", document_number=OTHER_VALID_CPF)
        with pytest.raises(ValidationError) as exc:
            services.producer.update(other["id"], {"document_number": VALID_CPF})
        assert exc.value.kind is ValidationKind.DUPLICATE_DOCUMENT

    def test_switching_type_revalidates_document(self, services, make_producer):
        created = make_producer()
        with pytest.raises(ValidationError) as exc:
            services.producer.update(created["id"], {"document_type": "CNPJ"})
        assert exc.value.kind is ValidationKind.INVALID_DOCUMENT

        updated = services.producer.update(
            created["id"], {"document_type": "CNPJ", "document_number": OTHER_VALID_CNPJ}
        )
        assert updated["document_type"] == "CNPJ"
        assert updated["document_number"] == "11222333000181"

    def test_unknown_id(self, services):
        with pytest.raises(NotFoundError):
            services.producer.update("missing", {"name": "x"})

    def test_cached_but_deleted_in_store(self, services, make_producer):
        created = make_producer()
        with get_db_session() as db:
            services.producers.delete_by_id(db, created["id"])
        with pytest.raises(NotFoundError):
            services.producer.update(created["id"], {"name": "x"})


class TestDelete:
    def test_read_after_delete(self, services, make_producer, fake_redis):
        created = make_producer()
        services.producer.delete(created["id"])
        assert f"producer:{created['id']}" not in fake_redis.store
        with pytest.raises(NotFoundError):
            services.producer.get_by_id(created["id"])

    def test_delete_unknown(self, services):
        with pytest.raises(NotFoundError):
            services.producer.delete("missing")


class TestSearches:
    def test_list_with_pagination(self, services, make_producer):
        make_producer(name="Bruno", document_number=VALID_CPF)
        make_producer(name="Ana", document_number=OTHER_VALID_CPF)
        make_producer(name="Carla", document_number=VALID_CNPJ, document_type="CNPJ")

        assert [p["name"] for p in services.producer.list_producers()] == ["Ana", "Bruno", "Carla"]
        assert [p["name"] for p in services.producer.list_producers(page=2, limit=2)] == ["Carla"]

    def test_invalid_pagination(self, services):
        with pytest.raises(ValidationError) as exc:
            services.producer.list_producers(page=0, limit=10)
        assert exc.value.kind is ValidationKind.INVALID_FILTER

    def test_search_by_name_is_case_insensitive(self, services, make_producer):
        make_producer(name="João da Silva")
        assert len(services.producer.search_by_name("joão")) == 1
        assert services.producer.search_by_name("pedro") == []

    def test_search_by_document(self, services, make_producer):
        make_producer(document_number=VALID_CPF)
        make_producer(name="Agro", document_number=VALID_CNPJ, document_type="CNPJ")

        assert len(services.producer.search_by_document_type("cnpj")) == 1
        found = services.producer.search_by_document("CPF", "123.456.789-09")
        assert [p["document_number"] for p in found] == ["12345678909"]

    def test_searches_do_not_touch_cache(self, services, make_producer, fake_redis):
        make_producer()
        keys_before = set(fake_redis.store)
        services.producer.search_by_name("jo")
        services.producer.list_producers()
        assert set(fake_redis.store) == keys_before
