from ev_crm.shared.models.common import (
    AuthResult,
    LoginRequest,
    PageWindow,
    SortDirective,
    UploadedAsset,
)
from ev_crm.shared.models.records import ComplaintRecord, DriverRecord, IdentityDetails, Record

__all__ = [
    "AuthResult",
    "ComplaintRecord",
    "DriverRecord",
    "IdentityDetails",
    "LoginRequest",
    "PageWindow",
    "Record",
    "SortDirective",
    "UploadedAsset",
]
