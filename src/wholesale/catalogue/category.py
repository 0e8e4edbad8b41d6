"""ProductCategory aggregate — supplier-scoped grouping of products.

A category decides whether its products can be ordered vacuum-packed (VAC)
and which unit of measure prices are quoted in.
"""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from wholesale.domain import wholesale


@wholesale.aggregate
class ProductCategory:
    supplier_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    enable_vac_pricing: Boolean(default=False)
    unit_of_measure: String(max_length=50, default="box")
    display_order: Integer(default=0, min_value=0)
    description: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(
        cls,
        supplier_id,
        name,
        enable_vac_pricing=False,
        unit_of_measure="box",
        display_order=0,
        description=None,
    ):
        from wholesale.catalogue.events import CategoryCreated

        now = datetime.now()
        category = cls(
            supplier_id=supplier_id,
            name=name,
            enable_vac_pricing=enable_vac_pricing,
            unit_of_measure=unit_of_measure or "box",
            display_order=display_order,
            description=description,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                supplier_id=supplier_id,
                name=name,
                enable_vac_pricing=enable_vac_pricing,
            )
        )
        return category

    def update_details(self, name=None, enable_vac_pricing=None, unit_of_measure=None, description=None):
        from wholesale.catalogue.events import CategoryUpdated

        if name is not None:
            self.name = name
        if enable_vac_pricing is not None:
            self.enable_vac_pricing = enable_vac_pricing
        if unit_of_measure is not None:
            self.unit_of_measure = unit_of_measure
        if description is not None:
            self.description = description
        self.updated_at = datetime.now()

        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                enable_vac_pricing=self.enable_vac_pricing,
                unit_of_measure=self.unit_of_measure,
            )
        )

    def deactivate(self):
        from wholesale.catalogue.events import CategoryDeactivated

        if not self.is_active:
            raise ValidationError({"status": ["Category is already inactive"]})

        now = datetime.now()
        self.is_active = False
        self.updated_at = now

        self.raise_(
            CategoryDeactivated(
                category_id=self.id,
                deactivated_at=now,
            )
        )
