"""
Unit Tests for Anamnesis Normalisation

Free-text records (API payloads and the clinic's Portuguese intake form)
must collapse to the same typed PatientProfile.
"""
import pytest

from app.core.clinical import (
    Allergen,
    Complaint,
    PatientProfile,
    Phototype,
    Sagging,
    Sex,
    SkinBiotype,
    SunExposure,
    evaluate,
    normalize_anamnesis,
)
from app.core.clinical.keywords import fold, match_all, COMPLAINT_KEYWORDS
from app.utils import InvalidProfileError


class TestIntakeForm:
    """Tests for the clinic's intake-form columns."""

    def test_portuguese_intake_record(self):
        """Test a full Portuguese intake row."""
        record = {
            "idade": "42",
            "sexo": "Masculino",
            "queixa_principal": ["Rugas", "Olheiras"],
            "fototipo": "IV",
            "biotipo_cutaneo": "Oleosa",
            "flacidez": "Grave",
            "gestante": False,
            "uso_retinoide": "sim",
            "exposicao_solar": "Alta",
            "alergias_medicamentosas": ["Ovo"],
            "lista_medicacoes": "Prednisona 20mg",
            "doencas_cronicas": ["Lúpus"],
            "rosacea": True,
        }
        profile = normalize_anamnesis(record)

        assert profile.age == 42
        assert profile.sex == Sex.MALE
        assert profile.complaints == {Complaint.WRINKLES, Complaint.DARK_CIRCLES}
        assert profile.skin_phototype == Phototype.IV
        assert profile.skin_biotype == SkinBiotype.OILY
        assert profile.sagging == Sagging.SEVERE
        assert profile.pregnant is False
        assert profile.isotretinoin_use is True
        assert profile.sun_exposure == SunExposure.HIGH
        assert profile.allergies == {Allergen.EGG_ALBUMIN}
        assert profile.immunosuppressive_medication is True
        assert profile.autoimmune_disease is True
        assert profile.sensitive_skin is True

    def test_sensitive_skin_aliases_are_ored(self):
        """Test a false rosacea column does not clear pele_sensivel."""
        profile = normalize_anamnesis({"age": 30, "pele_sensivel": True, "rosacea": False})
        assert profile.sensitive_skin is True

    def test_melasma_from_facial_pathologies(self):
        """Test melasma is read from the facial pathologies list."""
        profile = normalize_anamnesis({"age": 30, "facial_patologias": ["Melasma"]})
        assert profile.melasma is True

    def test_api_payload(self, anamnesis_payload):
        """Test the English API payload."""
        profile = normalize_anamnesis(anamnesis_payload)

        assert profile.age == 50
        assert profile.sex == Sex.MALE
        assert profile.complaints == {Complaint.WRINKLES}
        assert profile.skin_phototype == Phototype.III
        assert profile.skin_biotype == SkinBiotype.NORMAL
        assert profile.sagging == Sagging.NONE_MILD


class TestConflictingAliases:
    """Tests for records carrying the same field under several columns."""

    @pytest.mark.parametrize("record", [
        {"age": 32, "pregnant": True, "gestante": False},
        {"age": 32, "gestante": "sim", "pregnant": False},
        {"age": 32, "lactante": True, "lactating": "no"},
    ])
    def test_gestational_flag_survives_later_false_alias(self, record):
        """Test a later false column never lifts the gestational block."""
        plan = evaluate(normalize_anamnesis(record))
        assert plan.blocked is True
        assert plan.safety_score == 0
        assert plan.toxin_units_by_region == {}

    def test_isotretinoin_flag_survives_later_false_alias(self):
        """Test uso_retinoide is kept when uso_isotretinoina says no."""
        record = {
            "idade": 30,
            "uso_retinoide": True,
            "uso_isotretinoina": False,
            "queixa_principal": ["Cicatrizes"],
        }
        profile = normalize_anamnesis(record)
        plan = evaluate(profile)

        assert profile.isotretinoin_use is True
        assert plan.safety_score == 60
        assert plan.skin_care.microneedling_indication.startswith("Contraindicated")

    @pytest.mark.parametrize("record", [
        {"age": 30, "keloid_history": True, "historico_queloide": False},
        {"age": 30, "historico_queloide": "sim", "keloid_history": "no"},
    ])
    def test_keloid_aliases_are_ored(self, record):
        """Test the keloid flag holds whichever column is set."""
        assert normalize_anamnesis(record).keloid_history is True

    def test_first_non_blank_biotype_wins(self):
        """Test scalar aliases keep the first non-blank value."""
        profile = normalize_anamnesis({"age": 30, "biotipo_cutaneo": "Seca", "biotipo": "Oleosa"})
        assert profile.skin_biotype == SkinBiotype.DRY

    def test_blank_alias_does_not_shadow_later_value(self):
        """Test a blank column is skipped in favour of a filled alias."""
        profile = normalize_anamnesis({"age": 30, "biotipo_cutaneo": "", "biotipo": "Oleosa"})
        assert profile.skin_biotype == SkinBiotype.OILY


class TestComplaintMatching:
    """Tests for complaint keyword matching."""

    @pytest.mark.parametrize("text,expected", [
        ("Deep WRINKLES", Complaint.WRINKLES),
        ("linhas de expressão", Complaint.WRINKLES),
        ("dark circles", Complaint.DARK_CIRCLES),
        ("Bigode chinês", Complaint.NASOLABIAL),
        ("mustache area", Complaint.NASOLABIAL),
        ("Flacidez", Complaint.SAGGING),
        ("Manchas", Complaint.SPOTS),
        ("Poros dilatados", Complaint.PORES),
        ("Lábios finos", Complaint.LIPS),
    ])
    def test_single_keyword(self, text, expected):
        """Test English and Portuguese synonyms."""
        assert expected in match_all([text], COMPLAINT_KEYWORDS)

    def test_one_text_can_match_several_complaints(self):
        """Test "acne scars" yields both complaints."""
        complaints = match_all(["Cicatrizes de acne"], COMPLAINT_KEYWORDS)
        assert complaints == {Complaint.SCARS, Complaint.ACNE}

    def test_unknown_complaints_are_ignored(self):
        """Test unmatched and blank complaints are dropped."""
        profile = normalize_anamnesis({"age": 30, "complaints": ["hair loss", ""]})
        assert profile.complaints == frozenset()

    def test_enum_values_round_trip_through_matching(self):
        """Test every enum value matches its own member."""
        profile = normalize_anamnesis({"age": 30, "complaints": [c.value for c in Complaint]})
        assert profile.complaints == frozenset(Complaint)


class TestAllergyMatching:
    """Tests for allergen detection."""

    @pytest.mark.parametrize("text", ["Ovo", "ovos", "Egg", "eggs", "Albumina", "ovalbumina"])
    def test_egg_albumin_detected(self, text):
        """Test egg and albumin spellings."""
        assert normalize_anamnesis({"age": 30, "allergies": [text]}).allergies == {Allergen.EGG_ALBUMIN}

    @pytest.mark.parametrize("text", ["Alergia a antibiótico novo", "Novocaína", "Dipirona"])
    def test_words_containing_ovo_not_detected(self, text):
        """Test "ovo" inside another word is not an egg allergy."""
        profile = normalize_anamnesis({"age": 30, "allergies": [text]})
        assert profile.allergies == frozenset()
        assert evaluate(profile).safety_score == 100


class TestEnumParsing:
    """Tests for scalar enum fields."""

    @pytest.mark.parametrize("raw,expected", [
        ("V", Phototype.V),
        ("v", Phototype.V),
        ("5", Phototype.V),
        ("Fototipo VI", Phototype.VI),
        ("Fitzpatrick IV", Phototype.IV),
        ("type ii", Phototype.II),
        ("Fitzpatrick type V", Phototype.V),
        ("Fototipo tipo V", Phototype.V),
        ("V (morena escura)", Phototype.V),
        ("III - clara", Phototype.III),
        ("", Phototype.UNKNOWN),
        (None, Phototype.UNKNOWN),
        ("VII", Phototype.UNKNOWN),
        ("ivory", Phototype.UNKNOWN),
    ])
    def test_phototype(self, raw, expected):
        """Test prefixed, annotated and invalid phototypes."""
        assert normalize_anamnesis({"age": 30, "skin_phototype": raw}).skin_phototype == expected

    def test_labelled_dark_phototype_gets_calcium_hydroxyapatite(self):
        """Test a labelled phototype V reaches the dark-skin bioestimulator."""
        profile = normalize_anamnesis({"age": 40, "fototipo": "Fitzpatrick type V"})
        assert "calcium hydroxyapatite" in evaluate(profile).bioestimulator.product

    @pytest.mark.parametrize("raw,expected", [
        ("F", Sex.FEMALE),
        ("Feminino", Sex.FEMALE),
        ("female", Sex.FEMALE),
        ("M", Sex.MALE),
        ("Male", Sex.MALE),
        ("", Sex.FEMALE),
        ("other", Sex.FEMALE),
    ])
    def test_sex(self, raw, expected):
        """Test sex codes and words, defaulting to female."""
        assert normalize_anamnesis({"age": 30, "sex": raw}).sex == expected

    @pytest.mark.parametrize("raw,expected", [
        ("Leve", Sagging.NONE_MILD),
        ("none", Sagging.NONE_MILD),
        ("Moderada", Sagging.MODERATE),
        ("severe", Sagging.SEVERE),
        ("", Sagging.NONE_MILD),
        ("???", Sagging.NONE_MILD),
    ])
    def test_sagging_defaults_to_none_mild(self, raw, expected):
        """Test sagging grades, defaulting to none/mild."""
        assert normalize_anamnesis({"age": 30, "sagging": raw}).sagging == expected

    @pytest.mark.parametrize("raw,expected", [
        ("Mista", SkinBiotype.COMBINATION),
        ("Seca", SkinBiotype.DRY),
        ("oily / acne-prone", SkinBiotype.OILY),
        (None, SkinBiotype.UNKNOWN),
    ])
    def test_biotype(self, raw, expected):
        """Test biotype keywords."""
        assert normalize_anamnesis({"age": 30, "skin_biotype": raw}).skin_biotype == expected

    def test_fold_strips_accents_and_case(self):
        """Test fold on text, None and enum members."""
        assert fold("Exposição ALTA") == "exposicao alta"
        assert fold(None) == ""
        assert fold(Phototype.IV) == "iv"


class TestPreconditions:
    """Tests for rejected records."""

    @pytest.mark.parametrize("age", [-1, None, "", "abc", True, 30.5])
    def test_invalid_age_rejected(self, age):
        """Test missing, negative and non-integer ages."""
        with pytest.raises(InvalidProfileError) as exc_info:
            normalize_anamnesis({"age": age})
        assert exc_info.value.code == "INVALID_PROFILE"
        assert exc_info.value.field == "age"

    def test_missing_age_rejected(self):
        """Test a record without any age column."""
        with pytest.raises(InvalidProfileError):
            normalize_anamnesis({"complaints": ["wrinkles"]})

    def test_integral_float_age_accepted(self):
        """Test 42.0 is accepted as 42."""
        assert normalize_anamnesis({"age": 42.0}).age == 42

    def test_profile_rejects_negative_age(self):
        """Test direct construction validates age."""
        with pytest.raises(InvalidProfileError):
            PatientProfile(age=-5)

    def test_profile_rejects_unknown_complaint(self):
        """Test an unknown complaint names the offending field."""
        with pytest.raises(InvalidProfileError) as exc_info:
            PatientProfile(age=30, complaints=["hair loss"])
        assert exc_info.value.to_dict()["details"]["field"] == "complaints"

    def test_profile_freezes_iterables(self):
        """Test list inputs become frozensets of enums."""
        profile = PatientProfile(age=30, complaints=["wrinkles", "wrinkles"], allergies=("egg_albumin",))
        assert profile.complaints == frozenset({Complaint.WRINKLES})
        assert profile.allergies == frozenset({Allergen.EGG_ALBUMIN})
