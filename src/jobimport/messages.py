"""Human-readable import status messages."""

PENDING = "Pending"
SUCCESS = "Success"
FAILED_PREFIX = "Failed - "


def format_success() -> str:
    return SUCCESS


def format_failed_duplicate_job_name() -> str:
    return f"{FAILED_PREFIX}Duplicate job name"


def format_failed_exception(exc: BaseException) -> str:
    message = str(exc).strip() or exc.__class__.__name__
    return f"{FAILED_PREFIX}{message}"


def is_failure(status: str) -> bool:
    return status.startswith(FAILED_PREFIX)
