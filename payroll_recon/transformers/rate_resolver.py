"""Department lookup of employee names and pay rates."""
import logging
from typing import Dict, List, Sequence, Tuple

from payroll_recon.utilities.exceptions import UnknownEmployeeError
from payroll_recon.utilities.models import DepartmentRecord

logger = logging.getLogger(__name__)


def build_department_index(
    records: Sequence[DepartmentRecord],
) -> Tuple[Dict[int, DepartmentRecord], List[str]]:
    """
    Key department records by employee ID.

    The first record for an ID wins; later ones are reported and ignored.

    Args:
        records: Department records in file order

    Returns:
        Tuple of (index, errors)
    """
    index: Dict[int, DepartmentRecord] = {}
    errors: List[str] = []

    for record in records:
        existing = index.get(record.employee_id)
        if existing is not None:
            error_msg = (
                f"Duplicate department record for employee #{record.employee_id} "
                f"({record.department_code}) ignored, keeping {existing.department_code}"
            )
            logger.warning(error_msg)
            errors.append(error_msg)
            continue
        index[record.employee_id] = record

    return index, errors


def resolve_rates(employee_id: int, index: Dict[int, DepartmentRecord]) -> DepartmentRecord:
    """
    Look up the department record for an employee.

    Raises:
        UnknownEmployeeError: If no department lists the employee
    """
    try:
        return index[employee_id]
    except KeyError:
        raise UnknownEmployeeError(employee_id) from None
