from .common import Page, Pagination, SettingResponse
from .user import (
    UserCreate,
    UserAdminCreate,
    UserUpdate,
    UserResponse,
    UserSummary,
    Token,
    TokenData,
)
from .service import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceSummary
from .file import StoredFile, FileResponse, DeliverableResponse
from .request import (
    RequestCreate,
    RequestStatusUpdate,
    RequestResponse,
    RequestDetail,
    RequestPaymentSummary,
)
from .payment import (
    PaymentCreate,
    PaymentReview,
    PaymentResponse,
    DisputeCreate,
    DisputeResolve,
    DisputeResponse,
)
from .ticket import (
    TicketCreate,
    TicketUpdate,
    TicketReplyCreate,
    TicketReplyResponse,
    TicketResponse,
    TicketDetail,
)
from .notification import NotificationResponse, NotificationList, NotificationMarkRead
from .audit_log import AuditLogResponse
from .contact import ContactCreate, ContactUpdate, ContactResponse

__all__ = [
    "Page",
    "Pagination",
    "SettingResponse",
    "UserCreate",
    "UserAdminCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
    "Token",
    "TokenData",
    "ServiceCreate",
    "ServiceUpdate",
    "ServiceResponse",
    "ServiceSummary",
    "StoredFile",
    "FileResponse",
    "DeliverableResponse",
    "RequestCreate",
    "RequestStatusUpdate",
    "RequestResponse",
    "RequestDetail",
    "RequestPaymentSummary",
    "PaymentCreate",
    "PaymentReview",
    "PaymentResponse",
    "DisputeCreate",
    "DisputeResolve",
    "DisputeResponse",
    "TicketCreate",
    "TicketUpdate",
    "TicketReplyCreate",
    "TicketReplyResponse",
    "TicketResponse",
    "TicketDetail",
    "NotificationResponse",
    "NotificationList",
    "NotificationMarkRead",
    "AuditLogResponse",
    "ContactCreate",
    "ContactUpdate",
    "ContactResponse",
]
