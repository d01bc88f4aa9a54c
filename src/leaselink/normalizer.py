from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as dtparser


OFFER_FLOAT_FIELDS = {
    "net_monthly_installment": "NetMonthlyInstallment",
    "gross_monthly_installment": "GrossMonthlyInstallment",
    "net_initial_fee": "NetInitialFee",
    "gross_initial_fee": "GrossInitialFee",
    "percent_initial_fee": "PercentInitialFee",
    "net_residual_fee": "NetResidualFee",
    "gross_residual_fee": "GrossResidualFee",
    "percent_residual_fee": "PercentResidualFee",
    "interest_rate": "InterestRate",
}

# Webhook fields copied through unchanged (as strings when present).
NOTIFICATION_TEXT_FIELDS = {
    "transaction_id": "TransactionId",
    "company_name": "InvoiceVatCompanyName",
    "tax_id": "InvoiceVatIdentificationNumber",
    "city": "InvoiceVatAddressCity",
    "zip_code": "InvoiceVatAddressZipCode",
    "street_name": "InvoiceVatAddressStreetName",
    "street_number": "InvoiceVatAddressStreetNumber",
    "location_number": "InvoiceVatAddressLocationNumber",
    "partner_id": "PartnerId",
    "customer_external_document": "CustomerExternalDocument",
    "financial_product_type": "FinancialProductType",
    "guid": "Guid",
}


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(to_float(value, float(default)))
    except (ValueError, OverflowError):
        return default


def is_unset(value: Any) -> bool:
    """Values the webhook treats as "not set": None, False, 0, "" and "0"."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    return isinstance(value, (int, float)) and value == 0


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def normalize_offer(raw_offer: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Flatten one entry of CreateCalculation's "Offers" into a fixed shape.

    Missing or unparseable numbers become 0, the package id is always a
    string and the product type defaults to "".
    """
    offer: Dict[str, Any] = {
        "number_of_installments": to_int(raw_offer.get("NumberOfInstallments")),
    }
    for field, key in OFFER_FLOAT_FIELDS.items():
        offer[field] = to_float(raw_offer.get(key))

    package_id = raw_offer.get("CalculationPackageId")
    offer["calculation_package_id"] = "" if package_id is None else str(package_id)

    product_type = raw_offer.get("FinancialProductType")
    offer["financial_product_type"] = "" if product_type is None else str(product_type)
    return offer


def parse_operation_datetime(value: Any) -> datetime:
    """
    Parse the webhook OperationDateTime.

    LeaseLink sends 7 fractional digits ("2024-10-22T10:38:42.5776485Z"),
    which dateutil truncates to microseconds. Only ISO-8601 is accepted;
    raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not a timestamp: {value!r}")
    return dtparser.isoparse(value.strip())


def normalize_notification(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map a webhook payload to NotificationData field values.

    ContractGrossValue and NumberOfInstallments become None when unset
    (see `is_unset`); other values are coerced, unparseable ones to 0.
    """
    fields: Dict[str, Any] = {
        field: _optional_str(raw.get(key))
        for field, key in NOTIFICATION_TEXT_FIELDS.items()
    }

    gross_value = raw.get("ContractGrossValue")
    fields["contract_gross_value"] = None if is_unset(gross_value) else to_float(gross_value)

    installments = raw.get("NumberOfInstallments")
    fields["number_of_installments"] = None if is_unset(installments) else to_int(installments)

    fields["operation_date_time"] = parse_operation_datetime(raw.get("OperationDateTime"))
    return fields
