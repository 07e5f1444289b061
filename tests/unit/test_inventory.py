"""
Unit Tests for inventory-aware product substitution.
"""
import pytest

from app.core.clinical import (
    Allergen,
    Complaint,
    InventoryItem,
    PatientProfile,
    ProductClass,
    apply_inventory,
    evaluate,
)
from app.core.clinical.base import GENERIC_FILLER_PRODUCT
from app.core.clinical.rules_injectables import CALCIUM_HYDROXYAPATITE_PRODUCT
from app.core.clinical.rules_safety import ALBUMIN_FREE_TOXIN_PRODUCT
from app.utils import InventoryError


@pytest.fixture
def clinic_stock():
    return [
        InventoryItem("Botox", ProductClass.BOTULINUM_TOXIN, brand="Allergan", quantity=5),
        InventoryItem("Juvederm Voluma", ProductClass.HYALURONIC_ACID, brand="Allergan", quantity=3),
        InventoryItem("Radiesse", ProductClass.CALCIUM_HYDROXYAPATITE, brand="Merz", quantity=2),
        InventoryItem("Sculptra", ProductClass.POLY_L_LACTIC_ACID, brand="Galderma", quantity=0),
    ]


class TestApplyInventory:
    """Tests for substituting stocked products into a plan."""

    def test_substitutes_in_stock_products(self, dark_severe_profile, clinic_stock):
        """Test every indicated product is replaced by its stock line."""
        plan = evaluate(dark_severe_profile)
        stocked = apply_inventory(plan, clinic_stock)

        assert stocked.toxin_product == "Botox (Allergan)"
        assert stocked.filler_product == "Juvederm Voluma (Allergan)"
        assert stocked.bioestimulator.product == "Radiesse (Merz)"
        assert stocked.alerts == plan.alerts

    def test_input_plan_untouched(self, dark_severe_profile, clinic_stock):
        """Test substitution works on a copy."""
        plan = evaluate(dark_severe_profile)
        apply_inventory(plan, clinic_stock)
        assert plan.bioestimulator.product == CALCIUM_HYDROXYAPATITE_PRODUCT
        assert plan.filler_product == GENERIC_FILLER_PRODUCT

    def test_zero_quantity_counts_as_out_of_stock(self, clinic_stock):
        """Test a stock line with quantity 0 is skipped and alerted."""
        plan = evaluate(PatientProfile(age=40))   # light phototype -> PLLA
        stocked = apply_inventory(plan, clinic_stock)

        assert stocked.bioestimulator.product == plan.bioestimulator.product
        assert any("poly-L-lactic acid" in alert for alert in stocked.alerts)

    def test_missing_filler_alerts(self, dark_severe_profile):
        """Test an indicated filler with no hyaluronic acid in stock."""
        stock = [InventoryItem("Radiesse", ProductClass.CALCIUM_HYDROXYAPATITE, quantity=1)]
        stocked = apply_inventory(evaluate(dark_severe_profile), stock)

        assert stocked.filler_product == GENERIC_FILLER_PRODUCT
        assert any("hyaluronic acid filler" in alert for alert in stocked.alerts)

    def test_filler_not_substituted_when_not_indicated(self, clinic_stock):
        """Test the filler product stays generic without filler regions."""
        stocked = apply_inventory(evaluate(PatientProfile(age=30)), clinic_stock)
        assert stocked.filler_product == GENERIC_FILLER_PRODUCT

    def test_albumin_free_requirement_not_met_by_regular_toxin(self, clinic_stock):
        """Test a plain toxin never satisfies the albumin-free requirement."""
        profile = PatientProfile(age=50, complaints={Complaint.WRINKLES}, allergies={Allergen.EGG_ALBUMIN})
        stocked = apply_inventory(evaluate(profile), clinic_stock)

        assert stocked.toxin_product == ALBUMIN_FREE_TOXIN_PRODUCT
        assert any("albumin-free botulinum toxin" in alert for alert in stocked.alerts)

    def test_albumin_free_toxin_in_stock(self, clinic_stock):
        """Test the albumin-free line is picked under the allergy veto."""
        stock = clinic_stock + [InventoryItem("Xeomin", ProductClass.ALBUMIN_FREE_TOXIN, brand="Merz", quantity=1)]
        profile = PatientProfile(age=50, complaints={Complaint.WRINKLES}, allergies={Allergen.EGG_ALBUMIN})
        stocked = apply_inventory(evaluate(profile), stock)

        assert stocked.toxin_product == "Xeomin (Merz)"

    def test_albumin_free_toxin_satisfies_plain_requirement(self):
        """Test an albumin-free toxin can fill a plain toxin indication."""
        stock = [InventoryItem("Xeomin", ProductClass.ALBUMIN_FREE_TOXIN, quantity=1)]
        stocked = apply_inventory(evaluate(PatientProfile(age=30)), stock)
        assert stocked.toxin_product == "Xeomin"

    def test_safety_fields_carried_over(self, clinic_stock):
        """Test score and contraindications are not touched."""
        profile = PatientProfile(age=50, isotretinoin_use=True, allergies={Allergen.EGG_ALBUMIN})
        plan = evaluate(profile)
        stocked = apply_inventory(plan, clinic_stock)

        assert stocked.safety_score == plan.safety_score
        assert stocked.contraindications == plan.contraindications

    def test_no_alerts_for_treatments_not_indicated(self):
        """Test an empty inventory only alerts for indicated treatments."""
        stocked = apply_inventory(evaluate(PatientProfile(age=20)), [])
        assert stocked.alerts == []

    def test_blocked_plan_unchanged(self, clinic_stock):
        """Test a gestational block comes back as an equal copy."""
        plan = evaluate(PatientProfile(age=40, pregnant=True))
        stocked = apply_inventory(plan, clinic_stock)
        assert stocked == plan
        assert stocked is not plan


class TestInventoryItem:
    """Tests for parsing inventory rows."""

    def test_from_dict(self):
        """Test a well-formed row with a string quantity."""
        item = InventoryItem.from_dict(
            {"name": "Radiesse", "brand": "Merz", "product_class": "calcium_hydroxyapatite", "quantity": "3"}
        )
        assert item.product_class == ProductClass.CALCIUM_HYDROXYAPATITE
        assert item.quantity == 3
        assert item.in_stock

    def test_label_without_brand(self):
        """Test the label falls back to the bare name."""
        assert InventoryItem("Generic HA", ProductClass.HYALURONIC_ACID).label == "Generic HA"

    @pytest.mark.parametrize("data", [
        {"name": "", "product_class": "botulinum_toxin"},
        {"name": "Mystery", "product_class": "snake_oil"},
        {"name": "Botox", "product_class": "botulinum_toxin", "quantity": "many"},
    ])
    def test_from_dict_rejects_bad_rows(self, data):
        """Test malformed rows raise InventoryError."""
        with pytest.raises(InventoryError) as exc_info:
            InventoryItem.from_dict(data)
        assert exc_info.value.code == "INVENTORY_ERROR"
