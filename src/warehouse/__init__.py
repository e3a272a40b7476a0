"""Warehouse back office: inventory ledger, shipment and return workflows."""
