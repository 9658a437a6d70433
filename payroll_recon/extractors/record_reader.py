"""Input directory validation and flat-file loading for payroll reconstruction."""
import logging
import os
import re
from datetime import date
from pathlib import Path
from typing import List, Pattern

import pandas as pd

from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import (
    InvalidDirectoryError,
    NoDepartmentFilesError,
    NoPayrollFilesError,
)
from payroll_recon.utilities.models import SourceData

logger = logging.getLogger(__name__)


def validate_directory(directory: str | Path) -> Path:
    """
    Check that the input directory exists and can be listed and entered.

    Args:
        directory: Directory given on the command line

    Returns:
        Directory as a Path

    Raises:
        InvalidDirectoryError: If the directory is unusable
    """
    path = Path(directory)
    if not path.exists():
        raise InvalidDirectoryError(path, "does not exist")
    if not path.is_dir():
        raise InvalidDirectoryError(path, "is not a directory")
    if not os.access(path, os.R_OK):
        raise InvalidDirectoryError(path, "is not readable")
    if not os.access(path, os.X_OK):
        raise InvalidDirectoryError(path, "is not executable")
    return path


def payroll_file_regex(year: int) -> Pattern[str]:
    """Compile the payroll file name pattern for ``year``."""
    return re.compile(config.PAYROLL_FILE_PATTERN.format(year=f"{year:04d}"))


def is_payroll_file_name(name: str, year: int, strict_dates: bool = False) -> bool:
    """
    Check a file name against the date-coded payroll pattern.

    Matching is syntactic unless ``strict_dates`` is set, in which case the
    name must also be a real calendar date (no 0230, no 0431).
    """
    match = payroll_file_regex(year).match(name)
    if match is None:
        return False
    if not strict_dates:
        return True
    try:
        date(year, int(match.group("month")), int(match.group("day")))
    except ValueError:
        logger.debug("Skipping %s: not a calendar date", name)
        return False
    return True


def is_department_file_name(name: str) -> bool:
    return re.match(config.DEPARTMENT_FILE_PATTERN, name) is not None


def _list_files(directory: Path) -> List[Path]:
    """Regular files of ``directory`` in filesystem enumeration order."""
    with os.scandir(directory) as entries:
        return [Path(entry.path) for entry in entries if entry.is_file()]


def find_payroll_files(
    directory: str | Path,
    year: int,
    strict_dates: bool = False,
) -> List[Path]:
    """
    Find payroll files for the first half of ``year``.

    Args:
        directory: Directory to search (not recursive)
        year: Year suffix of the file names
        strict_dates: Reject names that are not real calendar dates

    Returns:
        Matching paths in enumeration order
    """
    return [
        path for path in _list_files(Path(directory))
        if is_payroll_file_name(path.name, year, strict_dates)
    ]


def find_department_files(directory: str | Path) -> List[Path]:
    """Find department files in ``directory`` in enumeration order."""
    return [path for path in _list_files(Path(directory)) if is_department_file_name(path.name)]


def read_lines(file_path: Path) -> pd.DataFrame:
    """
    Read a flat-text file into a frame of raw lines.

    Line terminators are removed; everything else in the line is kept so
    duplicate detection can compare exact text.
    """
    with open(file_path, encoding=config.FILE_ENCODING) as handle:
        rows = [
            (file_path.name, number, line.rstrip("\r\n"))
            for number, line in enumerate(handle, start=1)
        ]
    return pd.DataFrame(rows, columns=config.RAW_LINE_COLUMNS)


def _load_family(files: List[Path], data: SourceData) -> pd.DataFrame:
    frames: List[pd.DataFrame] = []
    for file_path in files:
        try:
            frame = read_lines(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            error_msg = f"File {file_path} could not be read: {exc}"
            logger.warning(error_msg)
            data.errors.append(error_msg)
            continue
        logger.debug("Read %d lines from %s", len(frame), file_path.name)
        frames.append(frame)
    return _concat_frames(frames)


def load_source_files(
    directory: str | Path,
    year: int,
    strict_dates: bool = False,
) -> SourceData:
    """
    Load payroll and department lines from the input directory.

    Args:
        directory: Validated input directory
        year: Year suffix of payroll file names
        strict_dates: Reject payroll names that are not calendar dates

    Returns:
        SourceData with raw line frames and recoverable errors

    Raises:
        NoPayrollFilesError: If no payroll file matches
        NoDepartmentFilesError: If no department file matches
    """
    base_path = Path(directory)
    payroll_files = find_payroll_files(base_path, year, strict_dates)
    if not payroll_files:
        raise NoPayrollFilesError(base_path, year)

    department_files = find_department_files(base_path)
    if not department_files:
        raise NoDepartmentFilesError(base_path)

    logger.info(
        "Found %d payroll files and %d department files in %s",
        len(payroll_files),
        len(department_files),
        base_path,
    )

    data = SourceData(payroll_files=len(payroll_files), department_files=len(department_files))
    data.payroll_lines = _load_family(payroll_files, data)
    data.department_lines = _load_family(department_files, data)
    return data


def _concat_frames(frames: List[pd.DataFrame]) -> pd.DataFrame:
    """Concatenate frames in order, keeping the raw line columns when empty."""
    valid_frames = [frame for frame in frames if not frame.empty]
    if not valid_frames:
        return pd.DataFrame(columns=config.RAW_LINE_COLUMNS)
    return pd.concat(valid_frames, ignore_index=True)
