"""
Inventory-Aware Product Substitution

Post-processing step layered on top of the engine: swaps the generic toxin,
filler and bioestimulator product names for products the clinic actually has in
stock. The engine itself stays inventory-agnostic.

    plan = evaluate(profile)
    plan = apply_inventory(plan, clinic_items)
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from app.utils import InventoryError, get_logger
from .base import ProductClass, TreatmentPlan

logger = get_logger(__name__)

OUT_OF_STOCK_ALERT = "Out of stock: no {label} available in inventory. Order required."

_PRODUCT_LABELS = {
    ProductClass.BOTULINUM_TOXIN.value:        "botulinum toxin",
    ProductClass.ALBUMIN_FREE_TOXIN.value:     "albumin-free botulinum toxin",
    ProductClass.HYALURONIC_ACID.value:        "hyaluronic acid filler",
    ProductClass.CALCIUM_HYDROXYAPATITE.value: "calcium hydroxyapatite",
    ProductClass.POLY_L_LACTIC_ACID.value:     "poly-L-lactic acid",
}

# An albumin-free toxin also satisfies a plain toxin requirement, never the reverse
_ACCEPTED_CLASSES = {
    ProductClass.BOTULINUM_TOXIN.value: (
        ProductClass.BOTULINUM_TOXIN.value,
        ProductClass.ALBUMIN_FREE_TOXIN.value,
    ),
}


@dataclass(frozen=True)
class InventoryItem:
    """One stock line as kept by the clinic's inventory table."""
    name: str
    product_class: ProductClass
    brand: str = ""
    quantity: int = 0

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0

    @property
    def label(self) -> str:
        return f"{self.name} ({self.brand})" if self.brand else self.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        name = str(data.get("name") or "").strip()
        if not name:
            raise InventoryError("inventory item without a name", details={"item": dict(data)})
        try:
            product_class = ProductClass(data.get("product_class"))
            quantity = int(data.get("quantity", 0))
        except (TypeError, ValueError) as exc:
            raise InventoryError(f"invalid inventory item: {exc}", product=name) from exc
        return cls(name=name, product_class=product_class, brand=str(data.get("brand") or ""), quantity=quantity)


def _pick(items: List[InventoryItem], required_class: str) -> Optional[InventoryItem]:
    accepted = _ACCEPTED_CLASSES.get(required_class, (required_class,))
    for item in items:
        if item.in_stock and item.product_class.value in accepted:
            return item
    return None


def apply_inventory(plan: TreatmentPlan, items: Iterable[InventoryItem]) -> TreatmentPlan:
    """
    Return a copy of `plan` with in-stock product names substituted.

    Only product names and stock alerts change; the safety score and
    contraindications are carried over untouched. Blocked plans are
    returned as an unchanged copy.
    """
    result = copy.deepcopy(plan)
    if result.blocked:
        return result

    stock = list(items)

    if result.toxin_units_by_region:
        item = _pick(stock, result.toxin_product_class)
        if item is None:
            result.alerts.append(OUT_OF_STOCK_ALERT.format(label=_PRODUCT_LABELS[result.toxin_product_class]))
        else:
            result.toxin_product = item.label

    if result.filler_by_region:
        item = _pick(stock, ProductClass.HYALURONIC_ACID.value)
        if item is None:
            result.alerts.append(
                OUT_OF_STOCK_ALERT.format(label=_PRODUCT_LABELS[ProductClass.HYALURONIC_ACID.value])
            )
        else:
            result.filler_product = item.label

    if result.bioestimulator.session_count > 0 and result.bioestimulator.product_class:
        required = result.bioestimulator.product_class
        item = _pick(stock, required)
        if item is None:
            result.alerts.append(OUT_OF_STOCK_ALERT.format(label=_PRODUCT_LABELS[required]))
        else:
            result.bioestimulator.product = item.label

    logger.debug(
        f"apply_inventory: toxin='{result.toxin_product}', filler='{result.filler_product}', "
        f"bioestimulator='{result.bioestimulator.product}' ({len(stock)} stock line(s))"
    )
    return result
