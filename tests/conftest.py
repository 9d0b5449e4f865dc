"""
Pytest configuration and shared fixtures for the polygon manager tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

ROOT = Path(__file__).parent.parent

# backend_python 以脚本目录方式运行，frontend 是普通包
sys.path.insert(0, str(ROOT / "backend_python"))
sys.path.insert(0, str(ROOT))

# 默认存储实例在导入时建库，必须在导入 store 之前指向临时文件
_DB_DIR = tempfile.mkdtemp(prefix="polygon_test_")
os.environ["POLYGON_DB_PATH"] = str(Path(_DB_DIR) / "polygons.db")
os.environ["POLYGON_LOG_DIR"] = str(Path(_DB_DIR) / "logs")

from fastapi.testclient import TestClient

from frontend.api import PolygonApi
from frontend.canvas import CanvasGeometry, DrawingSession
from main import app
from store import PolygonStore, store as default_store


# ============== Store Fixtures ==============

@pytest.fixture
def temp_store(tmp_path: Path) -> PolygonStore:
    """A store backed by a fresh database file."""
    return PolygonStore(str(tmp_path / "polygons.db"))


# ============== API Fixtures ==============

@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Test client over the app with an empty default store."""
    default_store.clear()
    with TestClient(app) as c:
        yield c
    default_store.clear()


@pytest.fixture
def api(client: TestClient) -> PolygonApi:
    """Frontend API client talking to the app in-process."""
    return PolygonApi(base_url="http://testserver/api", session=client)


# ============== Canvas Fixtures ==============

@pytest.fixture
def geometry() -> CanvasGeometry:
    """A canvas rendered at its virtual size."""
    return CanvasGeometry(800, 600)


@pytest.fixture
def session(geometry: CanvasGeometry) -> DrawingSession:
    """A drawing session that records every closed polygon."""
    closed = []
    s = DrawingSession(geometry, on_close=closed.append)
    s.closed = closed
    return s


@pytest.fixture
def triangle():
    return [[0, 0], [10, 0], [5, 10]]
