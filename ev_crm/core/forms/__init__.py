from ev_crm.core.forms.complaint_form import ComplaintForm
from ev_crm.core.forms.driver_form import DriverRegistrationForm
from ev_crm.core.forms.inline_edit import EditResult, InlineEditSession
from ev_crm.core.forms.rules import FieldRule, FieldState, describe
from ev_crm.core.forms.session import FormResult, FormSession

__all__ = [
    "ComplaintForm",
    "DriverRegistrationForm",
    "EditResult",
    "FieldRule",
    "FieldState",
    "FormResult",
    "FormSession",
    "InlineEditSession",
    "describe",
]
