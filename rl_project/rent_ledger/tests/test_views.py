from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from ..models import OwnerSettlement, Payment, RentInvoice
from .factories import (make_invoice, make_owner, make_property, make_tenant,
                        make_unit, make_user)


@pytest.fixture
def ledger(db):
    prop = make_property()
    unit = make_unit(prop, rent="80000.00")
    tenant = make_tenant(unit, "Usman Ali", due_day=28)
    owner = make_user("owner")
    make_owner(prop, owner, "100")
    return {"property": prop, "unit": unit, "tenant": tenant, "owner": owner}


@pytest.fixture
def owner_client(client, ledger):
    client.force_login(ledger["owner"])
    return client


@pytest.mark.django_db
def test_anonymous_requests_are_redirected_to_login(client):
    response = client.post(reverse("rent_ledger:generate-invoices"), {"month": 3, "year": 2025})
    assert response.status_code == 302
    assert not RentInvoice.objects.exists()


def test_generate_invoices_endpoint(owner_client, ledger):
    url = reverse("rent_ledger:generate-invoices")

    response = owner_client.post(url, {"month": 3, "year": 2025}, content_type="application/json")
    assert response.status_code == 201
    data = response.json()
    assert data["generated"] == 1
    assert data["invoices"][0]["amount"] == "80000.00"
    assert data["invoices"][0]["receipt_number"] == f"INV-202503-{ledger['tenant'].pk}"

    # form-encoded bodies work too, and a rerun bills nobody
    again = owner_client.post(url, {"month": "3", "year": "2025"})
    assert again.json()["generated"] == 0


def test_generate_invoices_rejects_bad_period(owner_client):
    response = owner_client.post(
        reverse("rent_ledger:generate-invoices"), {"month": 13, "year": 2025},
        content_type="application/json",
    )
    assert response.status_code == 400
    assert "month" in response.json()["error"]


def test_get_is_not_allowed_on_mutations(owner_client):
    response = owner_client.get(reverse("rent_ledger:generate-invoices"))
    assert response.status_code == 405


def test_pay_invoice_endpoint(owner_client, ledger):
    inv = make_invoice(ledger["tenant"], 3, 2025, amount="80000.00")
    url = reverse("rent_ledger:pay-invoice", args=[inv.pk])

    too_much = owner_client.post(url, {"paid_amount": "80001"}, content_type="application/json")
    assert too_much.status_code == 400

    response = owner_client.post(url, {"paid_amount": "30000", "payment_method": "bank"},
                                 content_type="application/json")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "partial"
    assert data["paid_amount"] == "30000.00"
    assert data["payment_method"] == "bank"

    missing = owner_client.post(reverse("rent_ledger:pay-invoice", args=[999999]), {},
                                content_type="application/json")
    assert missing.status_code == 404


def test_record_payment_endpoint_auto_matches(owner_client, ledger):
    inv = make_invoice(ledger["tenant"], 3, 2025, amount="80000.00")

    response = owner_client.post(
        reverse("rent_ledger:record-payment"),
        {"amount": "79999.50", "date": "2025-03-04", "tenant_name": "Usman Ali", "source": "bank"},
        content_type="application/json",
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "matched"
    assert data["matched_invoice_id"] == inv.pk
    assert data["date"] == "2025-03-04"
    assert Payment.objects.get(pk=data["id"]).source == "bank"


def test_record_payment_accepts_html_form_posts(owner_client, ledger):
    inv = make_invoice(ledger["tenant"], 3, 2025, amount="80000.00")

    response = owner_client.post(
        reverse("rent_ledger:record-payment"),
        {"amount": "80000", "date": "2025-03-04", "tenant_name": "Usman Ali",
         "csrfmiddlewaretoken": "form-token"},
    )

    assert response.status_code == 201
    assert response.json()["matched_invoice_id"] == inv.pk


def test_oversized_amounts_are_bad_requests(owner_client, ledger):
    payment = owner_client.post(
        reverse("rent_ledger:record-payment"), {"amount": "1e30", "date": "2025-03-04"},
        content_type="application/json",
    )
    assert payment.status_code == 400

    history = owner_client.post(
        reverse("rent_ledger:reconstruct-history", args=[ledger["unit"].pk]),
        {"current_rent": "45000", "yearly_increase_percent": "-99.9999", "start_year": 2015},
        content_type="application/json",
    )
    assert history.status_code == 400
    assert not Payment.objects.exists()


def test_malformed_json_is_a_bad_request(owner_client):
    response = owner_client.post(
        reverse("rent_ledger:record-payment"), "{not json", content_type="application/json"
    )
    assert response.status_code == 400


def test_reconstruct_history_endpoint(owner_client, ledger):
    this_year = timezone.localdate().year

    response = owner_client.post(
        reverse("rent_ledger:reconstruct-history", args=[ledger["unit"].pk]),
        {"current_rent": "45000", "yearly_increase_percent": "10", "start_year": this_year},
        content_type="application/json",
    )

    assert response.status_code == 201
    data = response.json()
    assert data["yearly_rents"] == [{"year": this_year, "rent": "45000.00"}]
    assert data["generated"] == len(data["invoices"]) >= 1
    assert all(i["is_historical"] for i in data["invoices"])


def test_settlement_endpoints(owner_client, ledger):
    make_invoice(ledger["tenant"], 3, 2025, amount="80000.00", status="paid", paid_amount="80000.00")
    prop = ledger["property"]

    response = owner_client.post(
        reverse("rent_ledger:calculate-settlements", args=[prop.pk]),
        {"month": 3, "year": 2025}, content_type="application/json",
    )
    assert response.status_code == 201
    [row] = response.json()
    assert row["owner_share"] == "80000.00"
    assert row["balance"] == "80000.00"

    listing = owner_client.get(reverse("rent_ledger:property-settlements", args=[prop.pk]))
    assert [r["id"] for r in listing.json()] == [row["id"]]

    paid_out = owner_client.post(
        reverse("rent_ledger:record-distribution", args=[row["id"]]),
        {"amount": "30000"}, content_type="application/json",
    )
    assert paid_out.json()["balance"] == "50000.00"

    mine = owner_client.get(reverse("rent_ledger:my-settlements")).json()
    assert mine["summary"] == {
        "total_earned": "80000.00",
        "total_distributed": "30000.00",
        "pending_settlement": "50000.00",
    }


def test_settlements_require_property_access(client, ledger):
    client.force_login(make_user("stranger"))
    prop = ledger["property"]

    response = client.post(
        reverse("rent_ledger:calculate-settlements", args=[prop.pk]),
        {"month": 3, "year": 2025}, content_type="application/json",
    )

    assert response.status_code == 403
    assert not OwnerSettlement.objects.exists()
    assert client.get(reverse("rent_ledger:property-settlements", args=[prop.pk])).status_code == 403


def test_access_request_flow(client, ledger):
    applicant = make_user("applicant", role="co_owner")
    client.force_login(applicant)
    prop = ledger["property"]

    created = client.post(
        reverse("rent_ledger:request-access", args=[prop.pk]),
        {"ownership_percent": "20"}, content_type="application/json",
    )
    assert created.status_code == 201
    pu_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    # applicants cannot approve themselves
    denied = client.post(reverse("rent_ledger:approve-access", args=[pu_id]))
    assert denied.status_code == 403

    client.force_login(ledger["owner"])
    approved = client.post(reverse("rent_ledger:approve-access", args=[pu_id]))
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert Decimal(approved.json()["ownership_percent"]) == Decimal("20")


def test_audit_logs_are_for_super_admins(client, ledger):
    client.force_login(ledger["owner"])
    client.post(reverse("rent_ledger:generate-invoices"), {"month": 3, "year": 2025},
                content_type="application/json")
    assert client.get(reverse("rent_ledger:audit-logs")).status_code == 403

    client.force_login(make_user("admin", role="super_admin"))
    response = client.get(reverse("rent_ledger:audit-logs"))

    assert response.status_code == 200
    assert [entry["action"] for entry in response.json()] == ["generate_invoices"]
