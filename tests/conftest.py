import sys
from pathlib import Path

import pytest

# Make "src/" importable without installing the package
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")


@pytest.fixture
def valid_item_fields():
    return {
        "name": "Test Product",
        "quantity": 1,
        "category_level1": "Electronics",
        "unit_net_price": 1000.00,
        "unit_gross_price": 1230.00,
        "tax": "23",
        "unit_tax_value": 230.00,
    }


@pytest.fixture
def calculation_payload():
    return {
        "CalculationId": "C1",
        "CalculationUrl": "/c/1",
        "TotalNetValue": 100,
        "TotalGrossValue": 123,
        "TotalTaxValue": 23,
        "Offers": [],
    }


@pytest.fixture
def notification_payload():
    return {
        "Status": 4,
        "StatusName": "SIGN_CONTRACT",
        "TransactionId": "30d9baf8b4564e6db4d16b615102ce87",
        "InvoiceVatCompanyName": "LeaseLink Sp. z o.o.",
        "InvoiceVatIdentificationNumber": "5272698282",
        "InvoiceVatAddressCity": "Warszawa",
        "InvoiceVatAddressZipCode": "03-840",
        "InvoiceVatAddressStreetName": "ul. Grochowska",
        "InvoiceVatAddressStreetNumber": "306/308",
        "InvoiceVatAddressLocationNumber": "",
        "PartnerId": "integracje",
        "CustomerExternalDocument": "ORDER-123",
        "FinancialProductType": "OperationalLeasing",
        "ContractGrossValue": 7419.13,
        "NumberOfInstallments": 36,
        "OperationDateTime": "2024-10-22T10:38:42.5776485Z",
        "Guid": "287673c74a914c429948c2cc7a823581",
    }
