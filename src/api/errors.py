"""Map compliance engine errors onto HTTP errors."""

import logging

from fastapi import HTTPException, status

from src.domain.errors import AllocationShortfallError, ComplianceError, NotFoundError

logger = logging.getLogger(__name__)


def to_http_exception(error: ComplianceError) -> HTTPException:
    """
    NotFoundError -> 404, ledger defects -> 500, every other rule -> 400.

    DonorOverdrawnError is a defect too but is reported to clients as a 400.
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.to_dict())

    if isinstance(error, AllocationShortfallError):
        logger.critical("Ledger defect surfaced over HTTP: %s", error.message)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error.to_dict(),
        )

    if error.is_defect:
        logger.error("Allocation defect surfaced over HTTP: %s", error.message)

    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.to_dict())
