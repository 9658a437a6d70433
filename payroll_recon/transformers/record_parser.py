"""Record parsing, deduplication and employee indexing for payroll reconstruction."""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

import pandas as pd

from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import RecordParseError
from payroll_recon.utilities.models import DepartmentRecord, PayrollRecord

logger = logging.getLogger(__name__)

_EMPLOYEE_ID = re.compile(rf"^[0-9]{{1,{config.MAX_ID_DIGITS}}}$")


def parse_employee_id(text: str, line: str, location: Optional[str] = None) -> int:
    value = text.strip()
    if not _EMPLOYEE_ID.match(value):
        raise RecordParseError("non-numeric employee ID", line, location)
    return int(value)


def parse_amount(
    text: Optional[str],
    label: str,
    line: str,
    location: Optional[str] = None,
) -> Decimal:
    """
    Parse a non-negative decimal field.

    An absent or empty field is zero. Anything else must be a finite,
    non-negative number below MAX_AMOUNT.
    """
    if text is None or text.strip() == "":
        return config.ZERO

    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise RecordParseError(f"non-numeric {label}", line, location) from None

    if not value.is_finite() or value < 0:
        raise RecordParseError(f"invalid {label}", line, location)
    if value >= config.MAX_AMOUNT:
        raise RecordParseError(f"{label} out of range", line, location)
    return value


def parse_payroll_line(line: str, location: Optional[str] = None) -> PayrollRecord:
    """
    Parse one payroll line.

    Layout (comma separated): employee_id, hours_worked, ot_hours_worked.
    The two hour fields are optional.

    Args:
        line: Source text without its line terminator
        location: "file:line" used in error messages

    Returns:
        PayrollRecord

    Raises:
        RecordParseError: If the line does not fit the layout
    """
    fields = line.split(config.PAYROLL_DELIMITER)
    if len(fields) > config.PAYROLL_MAX_FIELDS:
        raise RecordParseError(
            f"expected at most {config.PAYROLL_MAX_FIELDS} fields, got {len(fields)}",
            line,
            location,
        )

    fields += [None] * (config.PAYROLL_MAX_FIELDS - len(fields))
    id_text, hours_text, ot_hours_text = fields

    return PayrollRecord(
        employee_id=parse_employee_id(id_text, line, location),
        hours_worked=parse_amount(hours_text, "hours worked", line, location),
        ot_hours_worked=parse_amount(ot_hours_text, "overtime hours", line, location),
        raw_line=line,
    )


def parse_department_line(line: str, location: Optional[str] = None) -> DepartmentRecord:
    """
    Parse one department line.

    Layout (colon separated): composite key, employee name, title (unused),
    pay rate, overtime rate. The composite key is ``<department>-<employee id>``.

    Args:
        line: Source text without its line terminator
        location: "file:line" used in error messages

    Returns:
        DepartmentRecord

    Raises:
        RecordParseError: If the line does not fit the layout
    """
    fields = line.split(config.DEPARTMENT_DELIMITER)
    if len(fields) != config.DEPARTMENT_FIELD_COUNT:
        raise RecordParseError(
            f"expected {config.DEPARTMENT_FIELD_COUNT} fields, got {len(fields)}",
            line,
            location,
        )

    key, name, _title, pay_rate_text, ot_rate_text = fields
    department_code, separator, id_text = key.strip().rpartition(config.DEPARTMENT_KEY_SEPARATOR)
    if not separator:
        raise RecordParseError("composite key has no employee ID", line, location)

    return DepartmentRecord(
        employee_id=parse_employee_id(id_text, line, location),
        department_code=department_code,
        employee_name=name.strip(),
        pay_rate=parse_amount(pay_rate_text, "pay rate", line, location),
        ot_rate=parse_amount(ot_rate_text, "overtime rate", line, location),
    )


def _location(row) -> str:
    return f"{row.source_file}:{row.line_number}"


def parse_payroll_frame(lines: pd.DataFrame) -> Tuple[pd.DataFrame, List[str]]:
    """
    Parse raw payroll lines into a typed frame.

    Malformed lines are skipped and reported; blank lines are ignored.

    Args:
        lines: Frame with source_file, line_number, raw_line

    Returns:
        Tuple of (payroll frame, errors)
    """
    errors: List[str] = []
    records: List[PayrollRecord] = []

    for row in lines.itertuples(index=False):
        if not row.raw_line.strip():
            logger.debug("Skipping blank line at %s", _location(row))
            continue
        try:
            records.append(parse_payroll_line(row.raw_line, _location(row)))
        except RecordParseError as exc:
            logger.warning("Skipping payroll line %s", exc)
            errors.append(str(exc))

    frame = pd.DataFrame(
        [
            (record.employee_id, record.hours_worked, record.ot_hours_worked, record.raw_line)
            for record in records
        ],
        columns=config.PAYROLL_COLUMNS,
    )
    return frame, errors


def parse_department_frame(lines: pd.DataFrame) -> Tuple[List[DepartmentRecord], List[str]]:
    """Parse raw department lines, in file order, skipping malformed ones."""
    errors: List[str] = []
    records: List[DepartmentRecord] = []

    for row in lines.itertuples(index=False):
        if not row.raw_line.strip():
            continue
        try:
            records.append(parse_department_line(row.raw_line, _location(row)))
        except RecordParseError as exc:
            logger.warning("Skipping department line %s", exc)
            errors.append(str(exc))

    return records, errors


def deduplicate_records(df: pd.DataFrame, label: str = "") -> pd.DataFrame:
    """
    Remove payroll records whose source text repeats an earlier line.

    Identity is the exact raw line, so "7,10" and "7,10.0" both survive.

    Args:
        df: Parsed payroll frame
        label: Label for logging

    Returns:
        Deduplicated frame
    """
    if df.empty:
        return df

    before = len(df)
    result = df.drop_duplicates(subset=["raw_line"], keep="first")
    removed = before - len(result)

    if label and removed > 0:
        logger.info("%s: removed %s duplicate rows", label, removed)

    return result


def build_employee_index(df: pd.DataFrame) -> List[int]:
    """Distinct employee IDs in ascending numeric order."""
    if df.empty:
        return []
    return sorted(int(employee_id) for employee_id in df["employee_id"].unique())
