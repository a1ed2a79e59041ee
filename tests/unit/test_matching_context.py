from src.models import VariationType


def test_normalize_embedded_variation(context):
    assert context.normalize_variation_name("Buffalo Wings 12pc") == ("12 pcs", VariationType.QUANTITY)


def test_normalize_size_abbreviations(context):
    assert context.normalize_variation_name("lg") == ("Large", VariationType.SIZE)
    assert context.normalize_variation_name("sm") == ("Small", VariationType.SIZE)
    assert context.normalize_variation_name("med") == ("Medium", VariationType.SIZE)
    assert context.normalize_variation_name("xl") == ("XL", VariationType.SIZE)


def test_normalize_strips_dash(context):
    assert context.normalize_variation_name("- Large")[0] == "Large"
    assert context.normalize_variation_name("- spicy") == ("Spicy", None)


def test_normalize_title_cases_lowercase(context):
    assert context.normalize_variation_name("extra large") == ("Extra Large", None)


def test_normalize_keeps_mixed_case(context):
    assert context.normalize_variation_name("BBQ") == ("BBQ", None)


def test_normalize_empty(context):
    assert context.normalize_variation_name("") == ("", None)


def test_normalized_base_name(context):
    assert context.normalized_base_name("Lg Coke") == "coca cola"
    assert context.normalized_base_name("Hamburger") == "hamburger"
    assert context.normalized_base_name("Crème Brûlée") == "creme brulee"


def test_normalized_base_name_when_pattern_consumes_name(context):
    assert context.normalized_base_name("12 pcs") == "12 pcs"

