"""Test configuration for the failure predictor."""

from pathlib import Path
import sys

import pytest

# Ensure the local packages are importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SMALL_CSV = "a,b,failure\n1,2,0\n3,4,1\n"


@pytest.fixture
def small_csv() -> str:
    return SMALL_CSV


@pytest.fixture
def separable_csv() -> str:
    """Two features; failure iff a > 5. Includes one bad row."""
    lines = ["a,b,failure"]
    for i in range(40):
        a = i % 10 + 0.5
        lines.append(f"{a},{(i * 7) % 13},{int(a > 5)}")
    lines.append("oops,1,0")
    return "\n".join(lines) + "\n"


@pytest.fixture
def session():
    from pipeline.session import Session

    return Session()


@pytest.fixture
def model_store(tmp_path):
    from api.model_store import ModelStore

    return ModelStore(tmp_path / "models")
