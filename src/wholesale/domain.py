"""Wholesale bounded context — B2B ordering between customers and suppliers.

Handles supplier price lists (draft → pending approval → active → archived),
customer/supplier eligibility, order placement with frozen pricing, and the
admin approval inbox that gates orders and price lists.
"""

from protean.domain import Domain

# Domain Composition Root
wholesale = Domain(name="wholesale")
