"""Domain events for CustomerSupplierAssociation."""

from protean.fields import DateTime, Identifier, String

from wholesale.domain import wholesale


@wholesale.event(part_of="CustomerSupplierAssociation")
class AssociationCreated:
    """A customer may now order from a supplier."""

    __version__ = 1

    association_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    created_by: Identifier()
    created_at: DateTime(required=True)


@wholesale.event(part_of="CustomerSupplierAssociation")
class AssociationActivated:
    __version__ = 1

    association_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    activated_at: DateTime(required=True)


@wholesale.event(part_of="CustomerSupplierAssociation")
class AssociationDeactivated:
    """The supplier is hidden from the customer; past orders are untouched."""

    __version__ = 1

    association_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    reason: String(max_length=500)
    deactivated_at: DateTime(required=True)
