from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from .client import LeaseLinkApiClient
from .config import LeaseLinkConfig
from .enums import LogLevel
from .exceptions import LeaseLinkApiException
from .loggers import Context, LogSink, emit
from .responses import CalculationResponse, ChosenOfferResponse, NotificationData
from .schema import CalculationItem, CalculationOptions


class LeaseLink:
    """
    Entry point of the LeaseLink library.

    Operations:
    - create_calculation: price a cart and list financing offers
    - save_chosen_offer: store the customer's choice and get a redirect URL
    - handle_notification: parse a webhook payload (no network call)

    Every operation logs its start and outcome through the API client's
    sink and re-raises failures unchanged.
    """

    def __init__(self, config: LeaseLinkConfig, api_client: LeaseLinkApiClient) -> None:
        self.config = config
        self.api_client = api_client

        if not config.api_key:
            self._log(LogLevel.ERROR, "API key is missing")
            raise LeaseLinkApiException("API key is required")

    @classmethod
    def from_config(
        cls, config: LeaseLinkConfig, logger: Optional[LogSink] = None
    ) -> "LeaseLink":
        return cls(config, LeaseLinkApiClient(config, logger=logger))

    def _log(self, level: LogLevel, message: str, context: Context = None) -> None:
        emit(self.api_client.logger, level, message, context)

    # -------------------------------------------------
    # Public operations
    # -------------------------------------------------
    def create_calculation(
        self,
        items: Sequence[CalculationItem],
        options: Optional[CalculationOptions] = None,
    ) -> CalculationResponse:
        try:
            self._log(
                LogLevel.INFO,
                "Creating calculation",
                {"items_count": len(items), "has_options": options is not None},
            )

            token = self.api_client.get_token()

            data: Dict[str, Any] = {"Items": [item.to_wire_format() for item in items]}
            if options is not None:
                data.update(options.to_wire_format())

            response = self.api_client.call("/CreateCalculation", data, token["Token"])

            if isinstance(response, dict):
                self._log(
                    LogLevel.INFO,
                    "Calculation created successfully",
                    {
                        "calculation_id": response.get("CalculationId", "unknown"),
                        "offers_count": len(response.get("Offers") or []),
                    },
                )

            return CalculationResponse.from_api_response(response, self.config)
        except Exception as e:
            self._log(
                LogLevel.ERROR,
                "Calculation creation failed",
                {
                    "error": str(e),
                    "items": [_describe(item) for item in items],
                    "options": options.to_wire_format() if options is not None else None,
                },
            )
            raise

    def save_chosen_offer(
        self, calculation_id: str, calculation_package_id: str
    ) -> ChosenOfferResponse:
        """
        Save the offer picked by the customer.

        `calculation_id` is the id returned by create_calculation; it is sent
        as the API's OfferGuid field.
        """
        try:
            self._log(
                LogLevel.INFO,
                "Saving chosen offer",
                {
                    "offer_guid": calculation_id,
                    "calculation_package_id": calculation_package_id,
                },
            )

            token = self.api_client.get_token()

            data = {
                "OfferGuid": calculation_id,
                "CalculationPackageId": calculation_package_id,
            }
            response = self.api_client.call("/SaveChosenOffer", data, token["Token"])

            self._log(LogLevel.INFO, "Chosen offer saved successfully", {"response": response})

            return ChosenOfferResponse.from_api_response(response)
        except Exception as e:
            self._log(
                LogLevel.ERROR,
                "Saving chosen offer failed",
                {
                    "error": str(e),
                    "offer_guid": calculation_id,
                    "calculation_package_id": calculation_package_id,
                },
            )
            raise

    def handle_notification(self, raw_data: Mapping[str, Any]) -> NotificationData:
        try:
            self._log(
                LogLevel.INFO,
                "Processing notification",
                {
                    "status": _get(raw_data, "StatusName"),
                    "transaction_id": _get(raw_data, "TransactionId"),
                },
            )

            notification = NotificationData.from_payload(raw_data)

            self._log(
                LogLevel.INFO,
                "Notification processed",
                {
                    "status": notification.status.name,
                    "transaction_id": notification.transaction_id,
                    "document": notification.customer_external_document,
                    "invoice_data": notification.get_invoice_data(),
                },
            )
            return notification
        except Exception as e:
            self._log(
                LogLevel.ERROR,
                "Notification processing failed",
                {"error": str(e), "data": raw_data},
            )
            raise


def _get(data: Any, key: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(key, "unknown")
    return "unknown"


def _describe(item: Any) -> Any:
    if isinstance(item, CalculationItem):
        return item.to_wire_format()
    return repr(item)
