from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import src...` works when pytest uses importlib import mode.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture()
def sample_ratings_path() -> Path:
    return REPO_ROOT / "data" / "ratings_sample.csv"
