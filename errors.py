"""
Error taxonomy for the expense API
Every handled failure is turned into the same JSON envelope by app.py
"""


class ExpenseError(Exception):
    """Base class for failures reported to the caller"""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class Unauthorized(ExpenseError):
    status_code = 401
    default_message = "User not found"


class InvalidArgument(ExpenseError):
    status_code = 400
    default_message = "Invalid argument"


class NotFound(ExpenseError):
    # covers both "missing" and "owned by someone else"
    status_code = 404
    default_message = "Expense not found"


class Internal(ExpenseError):
    status_code = 500
    default_message = "Internal server error"
