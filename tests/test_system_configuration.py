import pytest

from pimsim.system_configuration import (
    AddressMappingScheme,
    ConfigStore,
    PIMMode,
    PIMPrecision,
    QueuingStructure,
    RowBufferPolicy,
    SchedulingPolicy,
    address_mapping_scheme,
    pim_data_length,
    pim_mode,
    pim_precision,
    queuing_structure,
    row_buffer_policy,
    scheduling_policy,
)


def test_string_round_trip():
    store = ConfigStore()
    store.set("SIM_TRACE_FILE", "trace.log")
    assert store.get_string("SIM_TRACE_FILE") == "trace.log"


def test_missing_string_raises():
    with pytest.raises(KeyError):
        ConfigStore().get_string("NOPE")


def test_missing_numbers_are_zero():
    store = ConfigStore()
    assert store.get_uint("X") == 0
    assert store.get_uint64("X") == 0
    assert store.get_float("X") == 0.0
    assert store.get_bool("X") is False


def test_uint_round_trip_and_prefix():
    store = ConfigStore({"A": 42, "B": "17abc", "C": "  8"})
    assert store.get_uint("A") == 42
    assert store.get_uint("B") == 17
    assert store.get_uint("C") == 8


def test_uint_invalid_raises():
    store = ConfigStore({"A": "abc"})
    with pytest.raises(ValueError):
        store.get_uint("A")


def test_negative_wraps_like_unsigned():
    store = ConfigStore({"A": "-1"})
    assert store.get_uint("A") == 0xFFFFFFFF
    assert store.get_uint64("A") == 2**64 - 1


def test_uint_truncates_to_32_bits_but_uint64_does_not():
    store = ConfigStore({"A": 2**33 + 5})
    assert store.get_uint64("A") == 2**33 + 5
    assert store.get_uint("A") == 5


def test_float_round_trip():
    store = ConfigStore({"tCK": 1.5, "V": "0.25volts"})
    assert store.get_float("tCK") == 1.5
    assert store.get_float("V") == 0.25


def test_float_invalid_raises():
    with pytest.raises(ValueError):
        ConfigStore({"V": "x"}).get_float("V")


def test_bool_only_exact_true():
    store = ConfigStore({"A": "true", "B": "True", "C": True, "D": False})
    assert store.get_bool("A") is True
    assert store.get_bool("B") is False
    assert store.get_bool("C") is True
    assert store.get_bool("D") is False


def test_update_from_file(tmp_path):
    path = tmp_path / "system.ini"
    path.write_text("; comment\nNUM_CHANS = 4 ; channels\nPIM_PRECISION=FP16\n")
    store = ConfigStore({"NUM_CHANS": 1})
    store.update_from_file(path)
    assert store.get_uint("NUM_CHANS") == 4
    assert pim_precision(store) is PIMPrecision.FP16
    assert "PIM_PRECISION" in store


def test_policies():
    store = ConfigStore(
        {
            "ROW_BUFFER_POLICY": "open_page",
            "SCHEDULING_POLICY": "bank_then_rank_round_robin",
            "QUEUING_STRUCTURE": "per_rank",
            "PIM_MODE": "mac_in_bank",
        }
    )
    assert row_buffer_policy(store) is RowBufferPolicy.OPEN_PAGE
    assert scheduling_policy(store) is SchedulingPolicy.BANK_THEN_RANK_ROUND_ROBIN
    assert queuing_structure(store) is QueuingStructure.PER_RANK
    assert pim_mode(store) is PIMMode.MAC_IN_BANK


def test_address_mapping_scheme_is_case_insensitive():
    store = ConfigStore({"ADDRESS_MAPPING_SCHEME": "SCHEME1"})
    assert address_mapping_scheme(store) is AddressMappingScheme.SCHEME1
    assert address_mapping_scheme(store).value == 1
    store.set("ADDRESS_MAPPING_SCHEME", "scheme8")
    assert address_mapping_scheme(store) is AddressMappingScheme.SCHEME8


@pytest.mark.parametrize(
    "key, func",
    [
        ("ROW_BUFFER_POLICY", row_buffer_policy),
        ("SCHEDULING_POLICY", scheduling_policy),
        ("QUEUING_STRUCTURE", queuing_structure),
        ("PIM_MODE", pim_mode),
        ("PIM_PRECISION", pim_precision),
        ("PIM_PRECISION", pim_data_length),
        ("ADDRESS_MAPPING_SCHEME", address_mapping_scheme),
    ],
)
def test_invalid_settings_raise(key, func):
    with pytest.raises(ValueError):
        func(ConfigStore({key: "bogus"}))


def test_scheme9_is_invalid():
    with pytest.raises(ValueError):
        address_mapping_scheme(ConfigStore({"ADDRESS_MAPPING_SCHEME": "scheme9"}))


@pytest.mark.parametrize(
    "precision, length, enum",
    [("FP16", 2, PIMPrecision.FP16), ("INT8", 1, PIMPrecision.INT8), ("FP32", 4, PIMPrecision.FP32)],
)
def test_precision_and_length(precision, length, enum):
    store = ConfigStore({"PIM_PRECISION": precision})
    assert pim_precision(store) is enum
    assert pim_data_length(store) == length