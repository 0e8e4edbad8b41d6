"""Product aggregate — one orderable line in a supplier's catalogue."""

from datetime import datetime

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from wholesale.domain import wholesale


@wholesale.aggregate
class Product:
    supplier_id: Identifier(required=True)
    category_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    unit_of_measure: String(max_length=50, default="box")
    display_order: Integer(default=0, min_value=0)
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, supplier_id, category_id, name, unit_of_measure="box", display_order=0):
        from wholesale.catalogue.events import ProductCreated

        now = datetime.now()
        product = cls(
            supplier_id=supplier_id,
            category_id=category_id,
            name=name,
            unit_of_measure=unit_of_measure or "box",
            display_order=display_order,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                supplier_id=supplier_id,
                category_id=category_id,
                name=name,
            )
        )
        return product

    def update_details(self, name=None, category_id=None, unit_of_measure=None, display_order=None):
        from wholesale.catalogue.events import ProductUpdated

        if name is not None:
            self.name = name
        if category_id is not None:
            self.category_id = category_id
        if unit_of_measure is not None:
            self.unit_of_measure = unit_of_measure
        if display_order is not None:
            self.display_order = display_order
        self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                category_id=self.category_id,
                name=self.name,
                unit_of_measure=self.unit_of_measure,
            )
        )

    def deactivate(self, reason=None):
        """Hide the product from new price lists and orders. No-op when already inactive."""
        from wholesale.catalogue.events import ProductDeactivated

        if not self.is_active:
            return

        now = datetime.now()
        self.is_active = False
        self.updated_at = now

        self.raise_(
            ProductDeactivated(
                product_id=self.id,
                reason=reason,
                deactivated_at=now,
            )
        )
