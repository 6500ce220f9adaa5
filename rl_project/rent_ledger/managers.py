from django.contrib.auth.base_user import BaseUserManager
from django.db import models


# -----------------------------------------
# Billing-period lookups for rent invoices
# -----------------------------------------
class RentInvoiceQuerySet(models.QuerySet):
    def for_period(self, month, year):     # Add queryset helper
        return self.filter(month=month, year=year)

    def for_units(self, unit_ids):
        return self.filter(unit_id__in=unit_ids)

    def outstanding(self):
        # Anything not fully settled on time is still a match candidate
        return self.exclude(status="paid")

    # Enables query:
    # RentInvoice.objects.for_period(3, 2025).for_units(ids)


class RentInvoiceManager(models.Manager):

    def get_queryset(self):  # ensure .for_period() is always available
        return RentInvoiceQuerySet(self.model, using=self._db)

    def for_period(self, month, year):
        return self.get_queryset().for_period(month, year)

    def for_units(self, unit_ids):
        return self.get_queryset().for_units(unit_ids)

    def outstanding(self):
        return self.get_queryset().outstanding()


# -----------------------------------------
# Tenant (occupant) lookups
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def for_unit(self, unit):
        return self.filter(unit=unit)


class TenantManager(models.Manager):

    def get_queryset(self):
        return TenantQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()

    def for_unit(self, unit):
        return self.get_queryset().for_unit(unit)


# -----------------------------------------
# Property membership lookups
# -----------------------------------------
OWNER_ROLES = ("property_owner", "co_owner")


class PropertyUserQuerySet(models.QuerySet):
    def approved(self):
        return self.filter(status="approved")

    def owners(self, property):
        # Only approved owner-role rows take part in settlement
        return self.approved().filter(property=property, role__in=OWNER_ROLES)


class PropertyUserManager(models.Manager):

    def get_queryset(self):
        return PropertyUserQuerySet(self.model, using=self._db)

    def approved(self):
        return self.get_queryset().approved()

    def owners(self, property):
        return self.get_queryset().owners(property)


""" Enforce rules around how users are created """


class UserManager(BaseUserManager):

    use_in_migrations = True  # Allow Django to serialize this manager in migrations

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:  # Username is required
            raise ValueError("The given username must be set")
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Superusers are also super admins for property access checks
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "super_admin")
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
