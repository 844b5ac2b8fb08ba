from __future__ import annotations

from pathlib import Path

import pytest

from localbiz.providers import data_store
from localbiz.providers.config import ProviderDataConfig
from localbiz.providers.data_store import clear_data_store, get_dataframe, get_providers

CSV = """id,name,category_key,tags,rating,is_member,is_featured,service_areas,business_hours,published
a-1,Alpha,home-services,"solar, asap",4.5,True,False,"bonita, chula vista","{""mon"": ""8-5""}",True
a-2,Beta,home-services,plumbing,,False,yes,,,True
a-3,Gamma,home-services,cleaning,3.0,False,False,,,False
b-1,Delta,real-estate,buy,4.0,False,False,,,True
"""


@pytest.fixture
def small_store(tmp_path: Path):
    path = tmp_path / "providers.csv"
    path.write_text(CSV, encoding="utf-8")
    clear_data_store()
    get_dataframe(ProviderDataConfig(raw_export_path=tmp_path / "raw.json", processed_path=path))
    yield
    clear_data_store()


def test_only_published_rows_are_loaded(small_store):
    ids = [p.id for p in get_providers("home-services")]
    assert ids == ["a-1", "a-2"]


def test_row_parsing(small_store):
    alpha, beta = get_providers("home-services")
    assert alpha.tags == ["solar", "asap"]
    assert alpha.service_areas == ["bonita", "chula vista"]
    assert alpha.business_hours == {"mon": "8-5"}
    assert alpha.featured and alpha.has_rating

    assert beta.rating is None
    assert not beta.has_rating
    assert beta.is_featured
    assert beta.service_areas == []


def test_unknown_category_has_no_providers(small_store):
    assert get_providers("pet-grooming") == []


def test_bundled_dataset_loads():
    clear_data_store()
    try:
        providers = get_providers("restaurants-cafes")
        assert "rc-7" not in [p.id for p in providers]
        assert all(p.category_key == "restaurants-cafes" for p in providers)
    finally:
        clear_data_store()
    assert data_store._df is None
