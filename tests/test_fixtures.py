"""
Regression tests for whole boards.

Each fixture is an image tests/fixtures/<name>.pgm with the expected board in
<name>.txt and, optionally, board settings in <name>.yaml.
Run with: pytest
"""
from __future__ import annotations

import io
from pathlib import Path

import pytest

from yaya.board import write_board
from yaya.config import BoardSettings, load_board_config
from yaya.img2yaya import img2yaya


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def discover_fixtures() -> list[tuple[str, Path, Path, Path | None]]:
    """Discover all image/board pairs (plus optional settings) in fixtures directory."""
    if not FIXTURES_DIR.exists():
        return []

    cases = []
    for txt_file in sorted(FIXTURES_DIR.glob("*.txt")):
        img_file = txt_file.with_suffix(".pgm")
        if not img_file.exists():
            continue
        yaml_file = txt_file.with_suffix(".yaml")
        cases.append((txt_file.stem, img_file, txt_file, yaml_file if yaml_file.exists() else None))
    return cases


FIXTURE_CASES = discover_fixtures()
FIXTURE_IDS = [name for name, _, _, _ in FIXTURE_CASES]


def test_fixtures_present():
    assert len(FIXTURE_CASES) >= 5


@pytest.mark.parametrize(
    "name,img_path,txt_path,yaml_path",
    FIXTURE_CASES,
    ids=FIXTURE_IDS,
)
def test_board_fixture(name: str, img_path: Path, txt_path: Path, yaml_path: Path | None):
    settings = load_board_config(yaml_path) if yaml_path else BoardSettings()
    grid = img2yaya(img_path, settings)

    sink = io.BytesIO()
    write_board(grid, sink)
    actual = sink.getvalue().decode("ascii")
    expected = txt_path.read_text(encoding="ascii")

    if actual != expected:
        msg = f"\nBoard mismatch for {img_path.name} ({settings}):\n"
        msg += "\nActual:\n" + actual
        msg += "\nExpected:\n" + expected
        pytest.fail(msg)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
