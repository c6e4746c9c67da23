class StoreError(Exception):
    """Base class for failures raised by repository implementations"""


class StoreUnavailableError(StoreError):
    """The backing store could not be reached or failed to execute"""


class DuplicateEmailError(StoreError):
    """A record with this email already exists"""
