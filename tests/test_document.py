import io
import subprocess
import sys
from pathlib import Path

import pytest

from qriskit.document import QRISDocument
from qriskit.errors import FormatError
from qriskit.models import FeeType
from qriskit.qris_encoder import compute_crc
from qriskit.tlv import TLVItem


def test_parse_static_document(sample_doc):
    assert sample_doc.is_static()
    assert not sample_doc.is_dynamic()


def test_get_returns_first_match(sample_doc):
    assert sample_doc.get("59") == "Toko 816"
    assert sample_doc.get("54") == ""


def test_get_prefers_first_occurrence_of_duplicate_tags():
    doc = QRISDocument([TLVItem("59", "First"), TLVItem("59", "Second")])

    assert doc.get("59") == "First"


def test_from_string_strips_whitespace(sample_raw):
    doc = QRISDocument.from_string(f"  {sample_raw}\n")

    assert doc.serialize() == sample_raw


@pytest.mark.parametrize("raw", ["", "   ", "000", "00020101021126990011"])
def test_from_string_rejects_malformed_payload(raw):
    with pytest.raises(FormatError):
        QRISDocument.from_string(raw)


def test_strict_from_string(sample_raw):
    with pytest.raises(FormatError):
        QRISDocument.from_string(sample_raw, strict=True)


def test_set_merchant_name_updates_value_and_crc(sample_doc):
    sample_doc.set_merchant_name("WarungA")

    assert sample_doc.get("59") == "WarungA"
    assert sample_doc.fields[-1].tag == "63"
    assert sample_doc.get("63") != "68FE"
    assert sample_doc.crc_valid()


def test_replace_keeps_position(sample_doc):
    before = [item.tag for item in sample_doc.fields]

    sample_doc.replace("60", "Surabaya")

    assert [item.tag for item in sample_doc.fields] == before
    assert "6008Surabaya" in sample_doc.serialize()


def test_replace_missing_tag_still_recomputes_crc(sample_doc):
    sample_doc.replace("99", "ignored")

    assert sample_doc.get("99") == ""
    assert sample_doc.crc_valid()


def test_replace_clears_stale_subitems(nested_doc):
    assert nested_doc.fields[2].subitems

    nested_doc.replace("26", "0011ID.OVO.WWW")

    assert nested_doc.fields[2].subitems == ()


def test_set_merchant_city_and_postal_code(sample_doc):
    sample_doc.set_merchant_city_and_postal_code("Jakarta", "12345")

    assert sample_doc.get("60") == "Jakarta"
    assert sample_doc.get("61") == "12345"
    assert sample_doc.crc_valid()


def test_remove_does_not_touch_crc(sample_doc):
    sample_doc.remove_tag("61")
    sample_doc.remove_prefix("5")

    assert [item.tag for item in sample_doc.fields] == ["00", "01", "26", "60", "63"]
    assert sample_doc.get("63") == "68FE"


def test_fields_snapshot_is_not_aliased(sample_doc):
    snapshot = sample_doc.fields

    sample_doc.set_merchant_name("WarungA")

    assert snapshot[7].value == "Toko 816"


def test_update_crc_moves_checksum_last():
    doc = QRISDocument([TLVItem("63", "0000"), TLVItem("00", "01"), TLVItem("63", "FFFF"), TLVItem("58", "ID")])

    crc = doc.update_crc()

    assert [item.tag for item in doc.fields] == ["00", "58", "63"]
    assert crc == compute_crc(doc.fields)


def test_crc_valid_requires_trailing_checksum():
    assert not QRISDocument([TLVItem("00", "01")]).crc_valid()


def test_to_data_projection(sample_doc):
    data = sample_doc.to_data()

    assert data.payload_format == "01"
    assert data.point_of_initiation == "11"
    assert set(data.merchant_accounts) == {"26", "51"}
    assert data.merchant_category_code == "4814"
    assert data.transaction_currency == "360"
    assert data.country_code == "ID"
    assert data.merchant_name == "Toko 816"
    assert data.merchant_city == "Jakarta Pusat"
    assert data.postal_code == "10330"
    assert data.crc == "68FE"
    assert data.fee_type is None
    assert data.unmapped == {}


def test_to_data_additional_data_and_unmapped():
    doc = QRISDocument.from_string("00020101021262180107INV-0010303A0164020099020163040000")

    data = doc.to_data()

    assert data.additional_data == {"01": "INV-001", "03": "A01"}
    assert data.unmapped == {"64": "00", "99": "01"}


def test_to_data_ignores_malformed_additional_data():
    doc = QRISDocument.from_string("0002016205AB12X63040000")

    assert doc.to_data().additional_data == {}


def test_to_data_fee_from_composite_tag(sample_doc):
    sample_doc.set_amount(10000, FeeType.PERCENT, 2.5)

    data = sample_doc.to_data()

    assert data.transaction_amount == "10000"
    assert data.fee_type == FeeType.PERCENT
    assert data.fee_value == "2.50"
    assert data.tip_or_convenience == "2.50"


def test_to_data_fee_from_reparsed_payload(sample_doc):
    sample_doc.set_amount(15000, FeeType.RUPIAH, 2000)

    data = QRISDocument.from_string(sample_doc.serialize()).to_data()

    assert data.tip_or_convenience == "02"
    assert data.fee_type == FeeType.RUPIAH
    assert data.fee_value == "2000"


def test_print_to_terminal_writes_rendering(sample_doc):
    out = io.StringIO()

    sample_doc.print_to_terminal(out)

    assert len(out.getvalue().splitlines()) > 10


def test_over_long_value_is_rejected_without_mutation(sample_doc, sample_raw):
    with pytest.raises(FormatError):
        sample_doc.set_merchant_name("X" * 100)

    assert sample_doc.serialize() == sample_raw


def test_value_of_ninety_nine_characters_round_trips(sample_doc):
    sample_doc.set_merchant_name("X" * 99)

    reparsed = QRISDocument.from_string(sample_doc.serialize())
    assert reparsed.get("59") == "X" * 99
    assert reparsed.crc_valid()


def test_city_and_postal_code_are_checked_together(sample_doc, sample_raw):
    with pytest.raises(FormatError):
        sample_doc.set_merchant_city_and_postal_code("Jakarta", "1" * 100)

    assert sample_doc.get("60") == "Jakarta Pusat"
    assert sample_doc.serialize() == sample_raw


def test_codec_import_does_not_load_image_libraries():
    code = (
        "import sys\n"
        "from qriskit.document import QRISDocument\n"
        "QRISDocument.from_string('000201010211').set_merchant_name('WarungA')\n"
        "print(sorted(m for m in ('cv2', 'numpy', 'qrcode', 'qriskit.renderer', 'qriskit.scanner') if m in sys.modules))\n"
    )
    result = subprocess.run(
        [sys.executable, "-c", code],
        cwd=Path(__file__).resolve().parent.parent,
        capture_output=True,
        text=True,
        check=True,
    )

    assert result.stdout.strip() == "[]"
