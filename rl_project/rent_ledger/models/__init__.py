from .auditlog import AuditLog
from .invoice import RentInvoice
from .membership import PropertyUser, User
from .payment import Payment
from .property import Property, Unit
from .settlement import OwnerSettlement
from .tenant import Tenant
