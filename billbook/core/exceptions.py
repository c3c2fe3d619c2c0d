"""Domain exceptions raised by the service layer.

Endpoints do not catch these; the handlers registered in ``billbook.main``
turn them into JSON error responses.
"""


class BillbookError(Exception):
    """Base class for expected, user-facing failures"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillbookError):
    """Input rejected before anything is persisted (bad amount, inverted dates, blank name)"""

    status_code = 400


class NotFoundError(BillbookError):
    """A bill, daily detail or participant id does not resolve under the given owner"""

    status_code = 404
