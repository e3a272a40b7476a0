"""Tenant-scoped loading of workflow aggregates."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from warehouse.exceptions import MissingReferenceError


def load_for_tenant(aggregate_cls, identifier: str, tenant_id: str):
    """Fetch an aggregate, treating another tenant's document as missing."""
    try:
        aggregate = current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise MissingReferenceError(aggregate_cls.__name__, str(identifier)) from None
    if str(aggregate.tenant_id) != str(tenant_id):
        raise MissingReferenceError(aggregate_cls.__name__, str(identifier))
    return aggregate
