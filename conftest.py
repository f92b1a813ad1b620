import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def _empty_shared_cache():
    from pysections.metadata_cache import clear_shared_cache

    clear_shared_cache()
    yield
    clear_shared_cache()


@pytest.fixture
def sections_dir(tmp_path: Path) -> Path:
    path = tmp_path / "sections"
    path.mkdir()
    return path
