"""
LeaseLink - Response Models

Typed, immutable views of CreateCalculation and SaveChosenOffer responses
and of webhook notifications. Each model validates the raw payload when it
is built and raises LeaseLinkApiException for anything it cannot accept.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from pydantic import Field

from .config import LeaseLinkConfig
from .enums import LogLevel, NotificationStatus
from .exceptions import LeaseLinkApiException
from .loggers import LogSink, emit
from .normalizer import normalize_notification, normalize_offer, to_float
from .schema import LeaseLinkModel


class CalculationOffer(LeaseLinkModel):
    """One financing offer returned by CreateCalculation."""

    number_of_installments: int = 0
    net_monthly_installment: float = 0.0
    gross_monthly_installment: float = 0.0
    net_initial_fee: float = 0.0
    gross_initial_fee: float = 0.0
    percent_initial_fee: float = 0.0
    net_residual_fee: float = 0.0
    gross_residual_fee: float = 0.0
    percent_residual_fee: float = 0.0
    interest_rate: float = 0.0
    calculation_package_id: str = ""
    financial_product_type: str = ""


class CalculationResponse(LeaseLinkModel):
    """
    Result of CreateCalculation.

    The API returns a relative CalculationUrl; `get_calculation_url()` joins
    it with the configured base URL (test or production) on every call.
    """

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "CalculationId",
        "CalculationUrl",
        "TotalNetValue",
        "TotalGrossValue",
        "TotalTaxValue",
        "Offers",
    )

    calculation_id: str
    calculation_path: str = Field(..., description="Relative CalculationUrl as returned")
    total_net_value: float
    total_gross_value: float
    total_tax_value: float
    offers: List[CalculationOffer] = Field(default_factory=list)
    raw_response: Dict[str, Any] = Field(default_factory=dict, repr=False)
    config: LeaseLinkConfig = Field(..., exclude=True, repr=False)

    @classmethod
    def from_api_response(
        cls,
        response: Mapping[str, Any],
        config: LeaseLinkConfig,
        logger: Optional[LogSink] = None,
    ) -> "CalculationResponse":
        try:
            cls._validate_response(response)
        except LeaseLinkApiException as e:
            emit(
                logger,
                LogLevel.ERROR,
                "CalculationResponse validation failed",
                {"error": str(e), "response": response},
            )
            raise

        emit(
            logger,
            LogLevel.INFO,
            "Parsing calculation response",
            {
                "calculation_id": response["CalculationId"],
                "offers_count": len(response["Offers"]),
            },
        )

        parsed = cls(
            logger=logger,
            calculation_id=str(response["CalculationId"]),
            calculation_path=str(response["CalculationUrl"]),
            total_net_value=to_float(response["TotalNetValue"]),
            total_gross_value=to_float(response["TotalGrossValue"]),
            total_tax_value=to_float(response["TotalTaxValue"]),
            offers=[CalculationOffer(**normalize_offer(o)) for o in response["Offers"]],
            raw_response=dict(response),
            config=config,
        )

        emit(
            logger,
            LogLevel.INFO,
            "Response parsed successfully",
            {
                "total_net_value": parsed.total_net_value,
                "total_gross_value": parsed.total_gross_value,
            },
        )
        return parsed

    @classmethod
    def _validate_response(cls, response: Any) -> None:
        if not isinstance(response, Mapping):
            raise LeaseLinkApiException("Invalid calculation response format")

        for field in cls.REQUIRED_FIELDS:
            if response.get(field) is None:
                raise LeaseLinkApiException(f"Missing {field} in response")

        offers = response["Offers"]
        if not isinstance(offers, list) or not all(isinstance(o, Mapping) for o in offers):
            raise LeaseLinkApiException("Invalid Offers format in response")

    def get_calculation_url(self) -> str:
        return self.config.base_url.rstrip("/") + self.calculation_path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "calculation_id": self.calculation_id,
            "calculation_url": self.get_calculation_url(),
            "total_net_value": self.total_net_value,
            "total_gross_value": self.total_gross_value,
            "total_tax_value": self.total_tax_value,
            "offers": [offer.model_dump() for offer in self.offers],
        }


class ChosenOfferResponse(LeaseLinkModel):
    """Result of SaveChosenOffer: where to send the customer next."""

    redirect_url: str
    raw_response: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_api_response(
        cls, response: Mapping[str, Any], logger: Optional[LogSink] = None
    ) -> "ChosenOfferResponse":
        if not isinstance(response, Mapping) or response.get("RedirectUrl") is None:
            error = LeaseLinkApiException("Missing RedirectUrl in response")
            emit(
                logger,
                LogLevel.ERROR,
                "ChosenOfferResponse validation failed",
                {"error": str(error), "response": response},
            )
            raise error

        parsed = cls(
            logger=logger,
            redirect_url=str(response["RedirectUrl"]),
            raw_response=dict(response),
        )
        emit(logger, LogLevel.INFO, "Response parsed successfully", {"redirect_url": parsed.redirect_url})
        return parsed

    def to_dict(self) -> Dict[str, Any]:
        return {"redirect_url": self.redirect_url}


class NotificationData(LeaseLinkModel):
    """
    Webhook notification sent by LeaseLink when an order changes status.

    Status transitions are not modelled here; callers act on `status`.
    """

    status: NotificationStatus
    status_name: str
    transaction_id: Optional[str] = None
    company_name: Optional[str] = None
    tax_id: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[str] = None
    location_number: Optional[str] = None
    partner_id: Optional[str] = None
    customer_external_document: Optional[str] = None
    financial_product_type: Optional[str] = None
    contract_gross_value: Optional[float] = None
    number_of_installments: Optional[int] = None
    operation_date_time: datetime
    guid: Optional[str] = None

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], logger: Optional[LogSink] = None
    ) -> "NotificationData":
        """
        Build from the decoded webhook body.

        Raises "Invalid status name" for an unknown StatusName and
        "Invalid notification data" for any other malformed field.
        """
        status_name = payload.get("StatusName") if isinstance(payload, Mapping) else None
        status = NotificationStatus.from_string(status_name)
        if status is None:
            error = LeaseLinkApiException("Invalid status name")
            cls._report_invalid(logger, error, {"payload": payload})
            raise error

        try:
            fields = normalize_notification(payload)
            return cls(status=status, status_name=status_name, **fields)
        except (LeaseLinkApiException, ValueError, TypeError, OverflowError):
            error = LeaseLinkApiException("Invalid notification data")
            cls._report_invalid(logger, error, {"payload": payload})
            raise error from None

    def get_invoice_data(self) -> Dict[str, Optional[str]]:
        return {
            "company_name": self.company_name,
            "tax_id": self.tax_id,
            "city": self.city,
            "zip_code": self.zip_code,
            "street_name": self.street_name,
            "street_number": self.street_number,
            "location_number": self.location_number,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["status"] = self.status.value
        data["operation_date_time"] = self.operation_date_time.isoformat()
        return data
