# file: loan_expiration/errors.py


class LoanJobError(Exception):
    """Base class for every failure raised by the loan expiration job."""


class ConfigurationError(LoanJobError):
    """A required environment value or credential file is missing."""


class FetchError(LoanJobError):
    """The loan list could not be retrieved from the loans API."""


class TransportError(FetchError):
    pass


class HTTPStatusError(FetchError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(FetchError):
    pass


class DateParseError(LoanJobError):
    def __init__(self, value: str, loan_id: str = ""):
        super().__init__(f"Invalid return date {value!r} for loan {loan_id or '<unknown>'}")
        self.value = value
        self.loan_id = loan_id


class DeliveryError(LoanJobError):
    """The push provider rejected or failed to deliver a notification."""

    def __init__(self, message: str, token: str = ""):
        super().__init__(message)
        self.token = token
