import pytest

from idiom_bench.harness.errors import ConfigurationFault, ExpectedAbsenceFault, HarnessError
from idiom_bench.harness.variant import Variant, require_present, validate_variants, variant_names


def test_variant_requires_name_and_callable():
    with pytest.raises(ConfigurationFault):
        Variant("", lambda: None)
    with pytest.raises(ConfigurationFault):
        Variant("x", 42)


def test_require_present_passes_value_through():
    payload = object()
    assert require_present(payload) is payload
    assert require_present(0) == 0


def test_require_present_raises_absence_fault():
    with pytest.raises(ExpectedAbsenceFault) as excinfo:
        require_present(None, "profile")
    assert excinfo.value.what == "profile"
    assert str(excinfo.value) == "profile is absent"


def test_fault_hierarchy():
    assert issubclass(ConfigurationFault, HarnessError)
    assert issubclass(ConfigurationFault, ValueError)
    assert issubclass(ExpectedAbsenceFault, HarnessError)
    assert not issubclass(ExpectedAbsenceFault, ConfigurationFault)


def test_validate_variants_rejects_empty_and_duplicates():
    with pytest.raises(ConfigurationFault):
        validate_variants([])
    with pytest.raises(ConfigurationFault):
        validate_variants([Variant("a", lambda: 1), Variant("a", lambda: 2)])


def test_variant_names_in_order():
    variants = [Variant("b", lambda: 1), Variant("a", lambda: 2)]
    validate_variants(variants)
    assert variant_names(variants) == ("b", "a")
