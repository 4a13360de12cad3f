from fastapi import HTTPException
from schemas.pin_schema import ErrorType

ERROR_STATUS_CODES = {
    ErrorType.VALIDATION:      400,
    ErrorType.NOT_FOUND:       404,
    ErrorType.CONFLICT:        409,
    ErrorType.PARTIAL_FAILURE: 500,
    ErrorType.STORE:           500,
}

GENERIC_RETRY_MESSAGE = "Something went wrong. Please try again."


def raise_for_result(result) -> None:
    if result.success:
        return
    status_code = ERROR_STATUS_CODES.get(result.error_type, 500)
    raise HTTPException(status_code=status_code, detail=result.error or GENERIC_RETRY_MESSAGE)
