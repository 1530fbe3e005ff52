import os
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite:///" + str(Path(tempfile.gettempdir()) / "seatmapper_test.db")

import pytest
from fastapi.testclient import TestClient

from seatmapper.db.base import Base
from seatmapper.db.session import engine
from seatmapper.editor.document import new_seat_map
from seatmapper.main import app
from seatmapper.schemas.seatmap import Category, Seat


@pytest.fixture
def make_seat():
    def _make(seat_id, x, y, w=0.05, h=0.05, **fields):
        return Seat(id=seat_id, label=fields.pop("label", seat_id.upper()[:20]), x=x, y=y, w=w, h=h, **fields)
    return _make


@pytest.fixture
def seat_map(make_seat):
    doc = new_seat_map("Main Hall")
    return doc.model_copy(update={
        "seats": [
            make_seat("a", 0.1, 0.1, category_id="vip"),
            make_seat("b", 0.3, 0.1, category_id="vip"),
            make_seat("c", 0.2, 0.3),
        ],
        "categories": [Category(id="vip", name="VIP", color="#FFE082", price=25)],
    })


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestClient(app)
    Base.metadata.drop_all(bind=engine)
