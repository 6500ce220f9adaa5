import decimal

import django.contrib.auth.validators
import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import rent_ledger.managers


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email address")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("full_name", models.CharField(blank=True, max_length=200)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("role", models.CharField(choices=[("property_owner", "Property owner"), ("co_owner", "Co-owner"), ("accountant", "Accountant"), ("tenant", "Tenant"), ("super_admin", "Super admin")], default="property_owner", max_length=20)),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "abstract": False,
            },
            managers=[
                ("objects", rent_ledger.managers.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("address", models.TextField()),
                ("type", models.CharField(choices=[("residential", "Residential"), ("commercial", "Commercial")], default="residential", max_length=20)),
                ("ownership_type", models.CharField(choices=[("single", "Single owner"), ("multi", "Multiple owners")], default="single", max_length=10)),
                ("total_units", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "properties",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Unit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("unit_name", models.CharField(max_length=100)),
                ("monthly_rent", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("property", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="units", to="rent_ledger.property")),
            ],
            options={
                "indexes": [models.Index(fields=["property"], name="unit_property_idx")],
            },
        ),
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("lease_start", models.DateField()),
                ("lease_end", models.DateField(blank=True, null=True)),
                ("security_deposit", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12)),
                ("rent_due_day", models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(28)])),
                ("is_active", models.BooleanField(default=True)),
                ("unit", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tenants", to="rent_ledger.unit")),
            ],
            options={
                "indexes": [models.Index(fields=["unit", "is_active"], name="tenant_unit_active_idx")],
            },
        ),
        migrations.CreateModel(
            name="RentInvoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("year", models.PositiveSmallIntegerField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("status", models.CharField(choices=[("unpaid", "Unpaid"), ("partial", "Partially paid"), ("paid", "Paid"), ("late", "Paid late")], default="unpaid", max_length=10)),
                ("paid_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=12)),
                ("paid_date", models.DateField(blank=True, null=True)),
                ("payment_method", models.CharField(blank=True, max_length=30, null=True)),
                ("receipt_number", models.CharField(blank=True, max_length=64, null=True)),
                ("is_historical", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="invoices", to="rent_ledger.tenant")),
                ("unit", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="invoices", to="rent_ledger.unit")),
            ],
            options={
                "ordering": ("-year", "-month", "-id"),
                "indexes": [
                    models.Index(fields=["year", "month"], name="inv_period_idx"),
                    models.Index(fields=["unit", "year", "month"], name="inv_unit_period_idx"),
                    models.Index(fields=["status"], name="inv_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "month", "year"), name="uq_invoice_tenant_period"),
                    models.CheckConstraint(condition=models.Q(("amount__gte", 0), ("paid_amount__gte", 0)), name="rent_invoice_non_negative_amounts"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("date", models.DateField()),
                ("reference_number", models.CharField(blank=True, max_length=100, null=True)),
                ("source", models.CharField(choices=[("manual", "Manual entry"), ("bank", "Bank statement"), ("online", "Online transfer")], default="manual", max_length=10)),
                ("tenant_name", models.CharField(blank=True, max_length=200, null=True)),
                ("status", models.CharField(choices=[("unmatched", "Unmatched"), ("matched", "Matched")], default="unmatched", max_length=10)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("matched_invoice", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="matched_payments", to="rent_ledger.rentinvoice")),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [models.Index(fields=["status"], name="payment_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="PropertyUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("property_owner", "Property owner"), ("co_owner", "Co-owner"), ("accountant", "Accountant"), ("tenant", "Tenant"), ("super_admin", "Super admin")], default="co_owner", max_length=20)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")], default="pending", max_length=10)),
                ("ownership_percent", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=5, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0")), django.core.validators.MaxValueValidator(decimal.Decimal("100"))])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("property", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="rent_ledger.property")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="property_memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["property", "status"], name="pu_property_status_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "property"), name="uq_user_property_membership"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OwnerSettlement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("year", models.PositiveSmallIntegerField()),
                ("total_rent", models.DecimalField(decimal_places=2, max_digits=14)),
                ("owner_share", models.DecimalField(decimal_places=2, max_digits=14)),
                ("amount_distributed", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=14)),
                ("balance", models.DecimalField(decimal_places=2, max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("property", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="settlements", to="rent_ledger.property")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="settlements", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-year", "-month", "property", "user"),
                "indexes": [
                    models.Index(fields=["property", "year", "month"], name="settle_prop_period_idx"),
                    models.Index(fields=["user"], name="settle_user_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("property", "user", "month", "year"), name="uq_settlement_owner_period"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("table_name", models.CharField(max_length=100)),
                ("record_id", models.CharField(max_length=100)),
                ("old_value", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("new_value", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["table_name", "record_id"], name="audit_table_record_idx"),
                    models.Index(fields=["created_at"], name="audit_created_idx"),
                ],
            },
        ),
    ]
