"""Main orchestration pipeline for payroll reconstruction."""
import logging
import time
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import EmptyDatasetError
from payroll_recon.utilities.models import BatchTotals, RunStats, SourceData
from payroll_recon.extractors import record_reader
from payroll_recon.transformers import payroll_service, rate_resolver, record_parser
from payroll_recon.loaders import report_writer

logger = logging.getLogger(__name__)


def reconstruct_payroll(
    source: SourceData,
    stream: Optional[TextIO] = None,
) -> Tuple[BatchTotals, RunStats]:
    """
    Turn loaded source lines into employee lines and batch totals.

    Employee lines are written as each employee is computed; the totals
    block is written once all employees are done.

    Args:
        source: Raw payroll and department lines
        stream: Output stream (stdout if not provided)

    Returns:
        Tuple of (batch totals, run statistics)

    Raises:
        EmptyDatasetError: If either record family has no valid records
    """
    stats = RunStats(
        payroll_files=source.payroll_files,
        department_files=source.department_files,
        payroll_lines=len(source.payroll_lines),
        department_lines=len(source.department_lines),
    )
    stats.errors.extend(source.errors)

    # Parse
    payroll, payroll_errors = record_parser.parse_payroll_frame(source.payroll_lines)
    departments, department_errors = record_parser.parse_department_frame(source.department_lines)
    stats.malformed_lines = len(payroll_errors) + len(department_errors)
    stats.errors.extend(payroll_errors)
    stats.errors.extend(department_errors)

    # Deduplicate payroll lines
    parsed_count = len(payroll)
    payroll = record_parser.deduplicate_records(payroll, "Payroll data")
    stats.duplicates_removed = parsed_count - len(payroll)

    if payroll.empty:
        raise EmptyDatasetError("payroll")
    if not departments:
        raise EmptyDatasetError("department")

    department_index, index_errors = rate_resolver.build_department_index(departments)
    stats.errors.extend(index_errors)

    employee_ids = record_parser.build_employee_index(payroll)
    logger.info(
        "Processing %d employees from %d payroll records against %d department records",
        len(employee_ids),
        len(payroll),
        len(department_index),
    )

    batch = BatchTotals()
    for totals in payroll_service.process_employees(employee_ids, payroll, department_index, stats):
        report_writer.write_employee_line(totals, stream)
        batch = batch.add(totals)

    report_writer.write_totals(batch, stream)
    return batch, stats


def _log_error_summary(errors: List[str]) -> None:
    if not errors:
        logger.info("✓ Processing completed successfully with no errors")
        return

    limit = config.ERROR_SUMMARY_LIMIT
    logger.warning("=" * 70)
    logger.warning("⚠ PROCESSING COMPLETED WITH %d ERROR(S):", len(errors))
    for i, error in enumerate(errors[:limit], 1):
        logger.warning("  %d. %s", i, error)
    if len(errors) > limit:
        logger.warning("  ... and %d more errors", len(errors) - limit)
    logger.warning("=" * 70)


def run_full_pipeline(
    directory: str | Path,
    year: Optional[int] = None,
    strict_dates: bool = False,
    stream: Optional[TextIO] = None,
) -> BatchTotals:
    """
    Run the complete payroll reconstruction pipeline.

    Args:
        directory: Directory holding payroll and department files
        year: Year suffix of payroll file names (config default if not provided)
        strict_dates: Reject payroll file names that are not calendar dates
        stream: Output stream (stdout if not provided)

    Returns:
        Batch totals of the run

    Raises:
        FatalInputError: If the input cannot support a run
    """
    run_year = year if year is not None else int(config.DEFAULT_YEAR)

    logger.info("=" * 70)
    logger.info("STARTING PAYROLL RECONSTRUCTION PIPELINE")
    logger.info("Directory: %s", directory)
    logger.info("Period: %02d-%02d/%d", config.FIRST_MONTH, config.LAST_MONTH, run_year)
    logger.info("=" * 70)

    start_time = time.time()

    base_path = record_reader.validate_directory(directory)
    source = record_reader.load_source_files(base_path, run_year, strict_dates)
    logger.info(
        "Loaded %d files: %d payroll lines, %d department lines",
        source.files_processed,
        len(source.payroll_lines),
        len(source.department_lines),
    )

    batch, stats = reconstruct_payroll(source, stream)

    logger.info(
        "Processing complete - Employees: %d paid, %d unknown | "
        "Lines: %d malformed, %d duplicates removed",
        stats.employees_paid,
        stats.unknown_employees,
        stats.malformed_lines,
        stats.duplicates_removed,
    )
    _log_error_summary(stats.errors)

    elapsed_time = time.time() - start_time
    logger.info("=" * 70)
    logger.info("PIPELINE COMPLETE - Total time: %.2f seconds", elapsed_time)
    logger.info("=" * 70)

    return batch
