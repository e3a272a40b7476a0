"""Warehouse bounded context: Prep-Center Back Office.

Administrators review customer shipment requests and product returns. Every
approved action adjusts the tenant's inventory ledger inside a single unit of
work and emits derived records (shipped records, invoices, audit logs).
Propagation to external storefronts happens after commit through event
handlers, never inside the transaction.
"""

from protean.domain import Domain

warehouse = Domain(name="warehouse")
