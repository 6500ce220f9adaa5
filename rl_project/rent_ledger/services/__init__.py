from .access import (approve_access, reject_access, request_access,
                     require_property_access, user_can_access_property,
                     user_is_property_owner)
from .audit_helper import log_action, snapshot
from .history import (ReconstructionResult, YearlyRent, compute_yearly_rents,
                      reconstruct_history)
from .invoicing import GenerationResult, generate_invoices
from .payment import (auto_match_payment, find_matching_invoice, pay_invoice,
                      record_payment)
from .settlement import (calculate_settlements, collected_rent,
                         owner_settlement_summary, ownership_total,
                         record_distribution)
