from .actions import (approve_access_requests, mark_invoices_paid,
                      rematch_payments, reject_access_requests)
from .auditlog import AuditLogAdmin
from .forms import TenantAdminForm, UserAdminChangeForm, UserAdminCreationForm
from .inlines import (PropertyUserInline, RentInvoiceInline, TenantInline,
                      UnitInline)
from .invoice import PaymentAdmin, RentInvoiceAdmin
from .membership import PropertyUserAdmin, UserAdmin
from .mixins import PropertyScopedAdminMixin
from .property import PropertyAdmin, TenantAdmin, UnitAdmin
from .settlement import OwnerSettlementAdmin
