from pathlib import Path

import pytest

from subscription_engine.seed_loader import DEFAULT_REGIONS, SeedError, load_seed_regions


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_default_seed() -> None:
    seed = load_seed_regions()
    assert seed == DEFAULT_REGIONS
    assert seed["London UK"] == 44418
    # Returned mapping is a copy.
    seed["Extra"] = 1
    assert "Extra" not in DEFAULT_REGIONS


def test_load_csv(tmp_path: Path) -> None:
    csv_path = _write(tmp_path / "regions.csv", "region, woeid\nLondon UK,44418\nParis France,615702\n")
    assert load_seed_regions(csv_path) == {"London UK": 44418, "Paris France": 615702}


def test_repeated_identical_rows_allowed(tmp_path: Path) -> None:
    csv_path = _write(tmp_path / "regions.csv", "region,woeid\nLondon UK,44418\nLondon UK,44418\n")
    assert load_seed_regions(csv_path) == {"London UK": 44418}


@pytest.mark.parametrize(
    "body",
    [
        "name,woeid\nLondon UK,44418\n",
        "region,woeid\nLondon UK,abc\n",
        "region,woeid\nLondon UK,0\n",
        "region,woeid\nLondon UK,\n",
        "region,woeid\nLondon UK,44418\nLondon UK,1\n",
        "region,woeid\n,44418\n",
    ],
)
def test_invalid_seed_rejected(tmp_path: Path, body: str) -> None:
    with pytest.raises(SeedError):
        load_seed_regions(_write(tmp_path / "regions.csv", body))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SeedError):
        load_seed_regions(tmp_path / "nope.csv")


def test_shipped_seed_matches_defaults() -> None:
    shipped = Path(__file__).resolve().parents[1] / "data" / "regions.csv"
    assert load_seed_regions(shipped) == DEFAULT_REGIONS
