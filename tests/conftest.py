"""Shared fixtures for payroll reconstruction tests."""
from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from payroll_recon.utilities import config


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a source file into the temporary input directory."""

    def _write(name: str, *lines: str) -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_dir(tmp_path: Path, write_file) -> Path:
    """Input directory with two departments and a spread of payroll days."""
    write_file(
        "A1",
        "A1-7:Alice:Engineer:20.00:30.00",
        "A1-1:Bob:Analyst:15.50:23.25",
    )
    write_file(
        "B12",
        "B12-10:Carol:Clerk:12.00:18.00",
    )
    write_file("01152015", "7,10,0", "1,8,1", "10,4")
    write_file("02012015", "7,5,2", "1,8,1")
    write_file("06302015", "10,,3", "99,8,0")
    return tmp_path


@pytest.fixture
def lines_frame() -> Callable[..., pd.DataFrame]:
    """Build a raw line frame the way the reader does."""

    def _frame(*lines: str, source_file: str = "01152015") -> pd.DataFrame:
        return pd.DataFrame(
            [(source_file, number, line) for number, line in enumerate(lines, start=1)],
            columns=config.RAW_LINE_COLUMNS,
        )

    return _frame
