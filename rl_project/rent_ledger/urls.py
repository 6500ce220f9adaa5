from django.urls import path

from . import views

app_name = "rent_ledger"

urlpatterns = [
    path("invoices/generate/", views.generate_invoices_view, name="generate-invoices"),
    path("invoices/<int:invoice_id>/pay/", views.pay_invoice_view, name="pay-invoice"),
    path("payments/", views.record_payment_view, name="record-payment"),
    path("units/<int:unit_id>/reconstruct-history/", views.reconstruct_history_view,
         name="reconstruct-history"),
    path("properties/<int:property_id>/calculate-settlements/",
         views.calculate_settlements_view, name="calculate-settlements"),
    path("properties/<int:property_id>/settlements/", views.property_settlements_view,
         name="property-settlements"),
    path("properties/<int:property_id>/request-access/", views.request_access_view,
         name="request-access"),
    path("property-users/<int:property_user_id>/approve/", views.approve_access_view,
         name="approve-access"),
    path("property-users/<int:property_user_id>/reject/", views.reject_access_view,
         name="reject-access"),
    path("settlements/my/", views.my_settlements_view, name="my-settlements"),
    path("settlements/<int:settlement_id>/distribute/", views.record_distribution_view,
         name="record-distribution"),
    path("audit-logs/", views.audit_log_view, name="audit-logs"),
]
