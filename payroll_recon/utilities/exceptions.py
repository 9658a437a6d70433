"""
Error taxonomy for payroll reconstruction.

    PayrollReconError (base)
    |
    +-- FatalInputError          aborts the run before any employee output
    |   +-- InvalidDirectoryError
    |   +-- NoPayrollFilesError
    |   +-- NoDepartmentFilesError
    |   +-- EmptyDatasetError
    |
    +-- RecoverableError         skips one line or one employee
        +-- RecordParseError
        +-- UnknownEmployeeError

Every class carries a machine-readable ``code``.
"""
from pathlib import Path
from typing import Optional


class PayrollReconError(Exception):
    """Base exception for all payroll reconstruction errors."""

    code: str = "PAYROLL_RECON_ERROR"


# Fatal


class FatalInputError(PayrollReconError):
    """Input cannot support a run at all."""

    code = "FATAL_INPUT"


class InvalidDirectoryError(FatalInputError):
    """Input directory is missing, not a directory, or not readable/executable."""

    code = "INVALID_DIRECTORY"

    def __init__(self, directory: Path, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(f"{directory}: {reason}")


class NoPayrollFilesError(FatalInputError):
    code = "NO_PAYROLL_FILES"

    def __init__(self, directory: Path, year: int):
        self.directory = directory
        self.year = year
        super().__init__(f"No payroll files for {year} found in {directory}")


class NoDepartmentFilesError(FatalInputError):
    code = "NO_DEPARTMENT_FILES"

    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(f"No department files found in {directory}")


class EmptyDatasetError(FatalInputError):
    """Matching files exist but yielded no usable records."""

    code = "EMPTY_DATASET"

    def __init__(self, family: str):
        self.family = family
        super().__init__(f"No valid {family} records remained after parsing")


# Recoverable


class RecoverableError(PayrollReconError):
    """Fault limited to a single line or employee."""

    code = "RECOVERABLE"


class RecordParseError(RecoverableError):
    code = "RECORD_PARSE"

    def __init__(self, reason: str, line: str, location: Optional[str] = None):
        self.reason = reason
        self.line = line
        self.location = location
        prefix = f"{location}: " if location else ""
        super().__init__(f"{prefix}{reason}: {line!r}")


class UnknownEmployeeError(RecoverableError):
    code = "UNKNOWN_EMPLOYEE"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee #{employee_id} has payroll records but no department record")
