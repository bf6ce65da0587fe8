"""
Conflict errors raised by the work-order queue.

They are DRF APIExceptions so views can let them propagate and the client
gets a 409 with a stable error code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code = "conflict"


class DuplicateRank(Conflict):
    default_detail = "Another active slot already uses this rank."
    default_code = "duplicate_rank"


class DuplicateStaff(Conflict):
    default_detail = "This staff member already has an active slot."
    default_code = "duplicate_staff"


class CapacityExceeded(Conflict):
    default_detail = "This slot is already at capacity."
    default_code = "capacity_exceeded"
