from .statuses import (
    UserRole,
    RequestStatus,
    PaymentStatus,
    DisputeStatus,
    TicketStatus,
    TicketPriority,
    ContactStatus,
)
from .user import User
from .service import Service
from .request import ServiceRequest
from .payment import Payment
from .dispute import PaymentDispute
from .ticket import Ticket, TicketReply
from .notification import Notification, NotificationType
from .audit_log import AuditLog
from .file import UploadedFile, Deliverable
from .setting import SystemSetting
from .contact import ContactMessage

__all__ = [
    "UserRole",
    "RequestStatus",
    "PaymentStatus",
    "DisputeStatus",
    "TicketStatus",
    "TicketPriority",
    "ContactStatus",
    "User",
    "Service",
    "ServiceRequest",
    "Payment",
    "PaymentDispute",
    "Ticket",
    "TicketReply",
    "Notification",
    "NotificationType",
    "AuditLog",
    "UploadedFile",
    "Deliverable",
    "SystemSetting",
    "ContactMessage",
]
