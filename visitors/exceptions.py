from rest_framework.exceptions import NotFound

from staff.exceptions import Conflict


class InvalidTransition(Conflict):
    default_detail = "This status change is not allowed."
    default_code = "invalid_transition"


class StaffNotFound(NotFound):
    default_detail = "No staff member matches that name and org unit."
    default_code = "staff_not_found"
