"""
Testes do CropService: lista por fazenda com chave secundária (TTL) e buscas
"""
import json

import pytest

from agro_registry.api.errors import DatabaseError, NotFoundError, ValidationError, ValidationKind

from conftest import LIST_TTL


def test_create_requires_fields(services):
    with pytest.raises(ValidationError) as exc:
        services.crop.create({"name": "Safra"})
    assert exc.value.kind is ValidationKind.MISSING_REQUIRED_FIELD
    assert set(exc.value.payload["fields"]) == {"year", "farm_id"}


def test_create_with_unknown_farm_fails_in_store(services):
    with pytest.raises(DatabaseError):
        services.crop.create({"name": "Safra", "year": "2024", "farm_id": "missing"})


@pytest.mark.parametrize("year", ["24", "20245", "abcd", "2024-1", " "])
def test_year_must_have_four_digits(services, make_farm, fake_redis, year):
    """Ano fora do formato AAAA é rejeitado antes de chegar ao banco."""
    farm_id = make_farm()["id"]
    keys_before = set(fake_redis.store)
    with pytest.raises(ValidationError) as exc:
        services.crop.create({"name": "Safra", "year": year, "farm_id": farm_id})
    assert exc.value.kind is ValidationKind.MISSING_REQUIRED_FIELD
    assert exc.value.payload["fields"] == ["year"]
    assert services.crop.list_crops() == []
    assert set(fake_redis.store) == keys_before


def test_update_with_malformed_year_keeps_previous_state(services, make_crop):
    crop = make_crop(year="2024")
    with pytest.raises(ValidationError):
        services.crop.update(crop["id"], {"year": "202"})
    assert services.crop.get_by_id(crop["id"])["year"] == "2024"


def test_crud_round(services, make_crop, fake_redis):
    crop = make_crop(year=2023)
    assert crop["year"] == "2023"
    assert services.crop.get_by_id(crop["id"]) == crop

    updated = services.crop.update(crop["id"], {"name": "Safra Inverno"})
    assert updated["name"] == "Safra Inverno"
    assert updated["farm_id"] == crop["farm_id"]

    services.crop.delete(crop["id"])
    assert f"crop:{crop['id']}" not in fake_redis.store
    with pytest.raises(NotFoundError):
        services.crop.get_by_id(crop["id"])


class TestFindByFarm:
    def test_populates_relation_key_with_ttl(self, services, make_farm, make_crop, fake_redis):
        farm_id = make_farm()["id"]
        make_crop(farm_id=farm_id, year="2023")
        make_crop(farm_id=farm_id, year="2024")

        crops = services.crop.find_by_farm(farm_id)
        assert [c["year"] for c in crops] == ["2024", "2023"]

        key = f"crops:farm:{farm_id}"
        assert json.loads(fake_redis.store[key]) == crops
        assert 0 < fake_redis.ttl(key) <= LIST_TTL

    def test_empty_result_is_not_found_and_not_cached(self, services, make_farm, fake_redis):
        farm_id = make_farm()["id"]
        with pytest.raises(NotFoundError):
            services.crop.find_by_farm(farm_id)
        assert f"crops:farm:{farm_id}" not in fake_redis.store

    def test_list_stays_stale_after_child_delete_until_ttl(self, services, make_farm, make_crop, fake_redis):
        farm_id = make_farm()["id"]
        first = make_crop(farm_id=farm_id, name="A", year="2023")
        make_crop(farm_id=farm_id, name="B", year="2024")
        assert len(services.crop.find_by_farm(farm_id)) == 2

        services.crop.delete(first["id"])

        assert len(services.crop.find_by_farm(farm_id)) == 2
        with pytest.raises(NotFoundError):
            services.crop.get_by_id(first["id"])

        fake_redis.advance(LIST_TTL + 1)
        assert [c["name"] for c in services.crop.find_by_farm(farm_id)] == ["B"]

    def test_list_ignores_new_children_until_ttl(self, services, make_farm, make_crop):
        farm_id = make_farm()["id"]
        make_crop(farm_id=farm_id, year="2023")
        services.crop.find_by_farm(farm_id)
        make_crop(farm_id=farm_id, year="2024")
        assert len(services.crop.find_by_farm(farm_id)) == 1


class TestSearches:
    def test_search_by_name_and_year(self, services, make_farm, make_crop):
        farm_id = make_farm()["id"]
        make_crop(farm_id=farm_id, name="Safra Verão", year="2023")
        make_crop(farm_id=farm_id, name="Safrinha", year="2024")

        assert len(services.crop.search_by_name("SAFR")) == 2
        assert [c["name"] for c in services.crop.search_by_year("2024")] == ["Safrinha"]
        assert services.crop.search_by_year("2024", farm_id="other") == []

    def test_year_range(self, services, make_farm, make_crop):
        farm_id = make_farm()["id"]
        for year in ("2020", "2022", "2024"):
            make_crop(farm_id=farm_id, year=year)
        assert [c["year"] for c in services.crop.search_by_year_range("2021", "2024")] == ["2022", "2024"]

    @pytest.mark.parametrize("start,end", [("abc", "2024"), ("2024", None), ("2025", "2020")])
    def test_invalid_year_range(self, services, start, end):
        with pytest.raises(ValidationError) as exc:
            services.crop.search_by_year_range(start, end)
        assert exc.value.kind is ValidationKind.INVALID_FILTER

    def test_list_orders_by_year_desc(self, services, make_farm, make_crop):
        farm_id = make_farm()["id"]
        for year in ("2021", "2023", "2022"):
            make_crop(farm_id=farm_id, year=year)
        assert [c["year"] for c in services.crop.list_crops()] == ["2023", "2022", "2021"]
