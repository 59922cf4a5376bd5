import pytest

from qriskit.errors import FormatError
from qriskit.tlv import TLVItem, build_tlv, parse_tlv, remove_tlv, remove_tlv_prefix


def test_parse_reads_items_in_order(sample_raw):
    items = parse_tlv(sample_raw)

    assert [item.tag for item in items] == [
        "00", "01", "26", "51", "52", "53", "58", "59", "60", "61", "63",
    ]
    assert items[7].value == "Toko 816"
    assert items[-1].value == "68FE"


def test_length_always_matches_value():
    item = TLVItem(tag="59", value="WarungA")

    assert item.length == 7
    assert item.serialize() == "5907WarungA"
    assert item.with_value("Toko").length == 4


def test_round_trip(sample_raw):
    items = parse_tlv(sample_raw)

    assert build_tlv(items) == sample_raw
    assert parse_tlv(build_tlv(items)) == items


def test_merchant_account_values_are_parsed_into_subitems():
    raw = "26370011ID.DANA.WWW01189360091530000000005802ID"
    items = parse_tlv(raw)

    account = items[0]
    assert [(sub.tag, sub.value) for sub in account.subitems] == [
        ("00", "ID.DANA.WWW"),
        ("01", "936009153000000000"),
    ]
    assert items[1].subitems == ()


def test_tags_outside_merchant_range_are_not_descended():
    items = parse_tlv("62110107INV-001")

    assert items[0].subitems == ()


def test_malformed_merchant_account_degrades_to_no_subitems(sample_raw):
    items = parse_tlv(sample_raw)

    assert items[2].tag == "26"
    assert items[2].subitems == ()
    assert len(items[2].value) == 57


def test_strict_mode_propagates_nested_failures(sample_raw):
    with pytest.raises(FormatError):
        parse_tlv(sample_raw, strict=True)


def test_trailing_partial_data_is_dropped():
    items = parse_tlv("000201010")

    assert [item.tag for item in items] == ["00"]


def test_trailing_partial_data_rejected_in_strict_mode():
    with pytest.raises(FormatError):
        parse_tlv("000201010", strict=True)


@pytest.mark.parametrize("raw", ["", "000", "00AB01", "000501", "0002010105"])
def test_malformed_input_raises_format_error(raw):
    with pytest.raises(FormatError) as excinfo:
        parse_tlv(raw)

    assert excinfo.value.code == "ERR_FORMAT"


def test_serialize_recomputes_length_from_value():
    assert build_tlv([TLVItem("54", "15000"), TLVItem("55020256", "2000")]) == "54051500055020256042000"


def test_remove_helpers_preserve_order():
    items = [TLVItem("00", "01"), TLVItem("55", "02"), TLVItem("54", "1"), TLVItem("55020357", "2.50"), TLVItem("58", "ID")]

    assert [i.tag for i in remove_tlv(items, "55")] == ["00", "54", "55020357", "58"]
    assert [i.tag for i in remove_tlv_prefix(items, "55")] == ["00", "54", "58"]
