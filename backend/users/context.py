"""
Caller identity as seen by the order services.

Users are owned by the auth service; this backend only sees the claims of
their access tokens. Every service call that depends on who is asking takes
an AuthorizationContext built from those claims.
"""
from dataclasses import dataclass
from typing import Optional

from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    MANAGER = "manager", "Manager"
    CUSTOMER = "customer", "Customer"


@dataclass(frozen=True)
class AuthorizationContext:
    role: str
    tenant_id: Optional[str] = None
    subject_id: Optional[str] = None

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_manager(self):
        return self.role == Role.MANAGER

    @property
    def is_customer(self):
        return self.role == Role.CUSTOMER

    def manages_tenant(self, tenant_id):
        """True for a manager whose tenant matches. Ids are compared as strings."""
        return (
            self.is_manager
            and self.tenant_id is not None
            and tenant_id is not None
            and str(self.tenant_id) == str(tenant_id)
        )

    @classmethod
    def from_claims(cls, claims):
        tenant = claims.get("tenant")
        subject = claims.get("sub")
        return cls(
            role=claims.get("role") or "",
            tenant_id=str(tenant) if tenant not in (None, "") else None,
            subject_id=str(subject) if subject not in (None, "") else None,
        )
