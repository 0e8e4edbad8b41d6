"""Read accessors for associations. Customer and supplier views list active rows only."""

from protean.utils.globals import current_domain

from wholesale.association.association import CustomerSupplierAssociation


def _repo():
    return current_domain.repository_for(CustomerSupplierAssociation)


def get_by_customer(customer_id):
    return [a.to_dict() for a in _repo().for_customer(customer_id)]


def get_by_supplier(supplier_id):
    return [a.to_dict() for a in _repo().for_supplier(supplier_id)]


def get_all():
    return [a.to_dict() for a in _repo().everything()]


def can_order_from(customer_id, supplier_id) -> bool:
    association = _repo().for_pair(customer_id, supplier_id)
    return association is not None and bool(association.is_active)
