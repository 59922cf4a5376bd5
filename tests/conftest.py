import pytest

from qriskit.document import QRISDocument

# Structurally valid but not scannable: merchant account values are not TLV.
SAMPLE_QRIS = (
    "00020101021126570011ID.DANA.WWW037491823004928374019283740192837401928UKC"
    "51440014ID.CO.QRIS.WWW84017629301574892036417UKC5204481453033605802ID"
    "5908Toko 8166013Jakarta Pusat610510330630468FE"
)

# Merchant account 26 with well-formed sub-fields and an additional data block.
NESTED_QRIS = (
    "000201010211"
    "26370011ID.DANA.WWW0118936009153000000000"
    "5204581453033605802ID"
    "5906Warung6007Bandung"
    "62180107INV-0010303A01"
    "6304ABCD"
)


@pytest.fixture
def sample_raw() -> str:
    return SAMPLE_QRIS


@pytest.fixture
def sample_doc() -> QRISDocument:
    return QRISDocument.from_string(SAMPLE_QRIS)


@pytest.fixture
def nested_doc() -> QRISDocument:
    return QRISDocument.from_string(NESTED_QRIS)
