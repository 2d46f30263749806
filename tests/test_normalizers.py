from idcheck.check.normalizers import (
    NormalizationPolicy,
    alphanumeric_uppercase,
    digits_only,
    normalize,
)


def test_digits_only_strips_punctuation():
    assert digits_only("123.456.789-09") == "12345678909"

def test_digits_only_drops_non_ascii_digits():
    # Arabic-Indic and full-width digits are not check-digit input
    assert digits_only("١٢3４5") == "35"

def test_alphanumeric_uppercase():
    assert alphanumeric_uppercase("abc-1d23") == "ABC1D23"
    assert alphanumeric_uppercase(" br15 0000 ") == "BR150000"

def test_alphanumeric_only_keeps_case():
    assert normalize("aB-1", NormalizationPolicy.alphanumeric_only) == "aB1"

def test_trim_and_none():
    assert normalize("  x y  ", NormalizationPolicy.trim) == "x y"
    assert normalize("  x y  ", NormalizationPolicy.none) == "  x y  "

def test_empty_input():
    for policy in NormalizationPolicy:
        assert normalize("", policy) == ""

def test_normalization_is_idempotent():
    samples = ["123.456.789-09", " BR15 0000 0000 0000 1093 2840 814P2 ", "ção-ÄB 12", "", "\t\n"]
    for policy in NormalizationPolicy:
        for s in samples:
            once = normalize(s, policy)
            assert normalize(once, policy) == once
