from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from fastapi.testclient import TestClient

from coffee_api.app import app
from coffee_api.places.cache import clear_cache
from coffee_api.places.data_store import DataFrameStore, get_store

# Default order (quality desc, name asc, id asc): c, a, e, b, f, g, d
SAMPLE_RECORDS = [
    {
        "id": "a", "name": "Alpha", "address_city": "Amsterdam",
        "lat": 52.37, "lon": 4.89, "phone": "+31 20 000 0001",
        "address_street": "Kinkerstraat", "address_housenumber": "12",
        "google_rating": 4.6, "google_review_count": 120, "quality_score": 9,
        "opening_hours": "Mo-Su 08:00-17:00",
        "opening_hours_start": "08:00", "opening_hours_end": "17:00",
        "has_wifi": True, "has_outdoor_seating": True, "is_verified": True,
        "tags": "wifi,outdoor",
    },
    {
        "id": "b", "name": "Bravo", "address_city": "amsterdam",
        "quality_score": 7,
        "opening_hours_start": "07:30", "opening_hours_end": "17:00",
        "has_wifi": True, "tags": "wifi",
    },
    {
        "id": "c", "name": "Charlie", "address_city": "Rotterdam",
        "google_rating": 2.0, "quality_score": 10,
        "opening_hours_start": "09:00", "opening_hours_end": "22:00",
        "tags": "wifi,outdoor,takeaway",
    },
    {
        "id": "d", "name": "Delta",
    },
    {
        "id": "e", "name": "Echo", "address_city": "'s-Gravenhage",
        "quality_score": 8,
        "opening_hours_start": "07:00", "opening_hours_end": "20:00",
        "tags": "outdoor",
    },
    {
        "id": "f", "name": "Foxtrot", "address_city": "Amsterdam",
        "google_rating": 4.0, "quality_score": 7,
        "opening_hours_start": "8:00", "opening_hours_end": "18:00",
        "tags": "takeaway",
    },
    {
        "id": "g", "name": "Golf", "address_city": "Utrecht",
        "quality_score": 7,
        "opening_hours_start": "10:00", "opening_hours_end": "16:00",
        "tags": "WiFi, Outdoor",
    },
]

DEFAULT_ORDER_IDS = ["c", "a", "e", "b", "f", "g", "d"]


@pytest.fixture
def sample_frame() -> pd.DataFrame:
    return pd.DataFrame(SAMPLE_RECORDS)


@pytest.fixture
def store(sample_frame: pd.DataFrame) -> DataFrameStore:
    return DataFrameStore(sample_frame, rng=np.random.default_rng(12345))


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def client(store: DataFrameStore):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def default_order_ids() -> list[str]:
    return list(DEFAULT_ORDER_IDS)
