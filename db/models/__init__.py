from .user import User, UserRole
from .vendor import Vendor, VendorServiceArea, VendorPortCapability
from .rfq import RFQ, RFQStatus
from .quote import Quote, QuoteLineItem, QuoteStatus
from .audit_log import AuditLog, AuditAction

__all__ = [n for n in dir() if n[:1].isupper()]
