"""
LeaseLink - Request Schema

Validated input models for the CreateCalculation endpoint. Models are
immutable and validated on construction; any violation raises
LeaseLinkApiException naming the offending field.
"""

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .enums import LogLevel
from .exceptions import LeaseLinkApiException
from .loggers import LogSink, emit


ALLOWED_TAX_VALUES: Tuple[str, ...] = ("ZW", "0", "5", "8", "23")


def is_present(value: Any) -> bool:
    """Optional wire fields are sent only when set and non-empty."""
    return value is not None and value != ""


class LeaseLinkModel(BaseModel):
    """
    Base for LeaseLink value objects.

    Construction accepts an optional `logger=` sink that receives a
    "<Model> validation failed" entry before the error propagates. The sink
    is not kept on the instance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, *, logger: Optional[LogSink] = None, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            error = type(self)._validation_errors(e)
            type(self)._report_invalid(logger, error, data)
            raise error from e
        except LeaseLinkApiException as e:
            type(self)._report_invalid(logger, e, data)
            raise

    @classmethod
    def _report_invalid(
        cls, logger: Optional[LogSink], error: LeaseLinkApiException, data: Dict[str, Any]
    ) -> None:
        emit(
            logger,
            LogLevel.ERROR,
            f"{cls.__name__} validation failed",
            {"error": str(error), "data": data},
        )

    @classmethod
    def _validation_errors(cls, exc: ValidationError) -> LeaseLinkApiException:
        """Key pydantic errors by wire field name where one exists."""
        wire_names = {
            name: field.serialization_alias
            for name, field in cls.model_fields.items()
            if field.serialization_alias
        }
        return LeaseLinkApiException.from_validation_error(exc, wire_names)

    def _wire_fields(self, optional: Tuple[str, ...]) -> Dict[str, Any]:
        fields = type(self).model_fields
        data = self.model_dump(by_alias=True, exclude=set(optional))
        for name in optional:
            value = getattr(self, name)
            if is_present(value):
                data[fields[name].serialization_alias or name] = value
        return data


class CalculationItem(LeaseLinkModel):
    """A single cart position sent for a leasing calculation."""

    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = (
        "category_level2",
        "category_level3",
        "item_id",
    )

    name: str = Field(..., serialization_alias="Name")
    quantity: int = Field(..., serialization_alias="Quantity")
    category_level1: str = Field(..., serialization_alias="CategoryLevel1")
    unit_net_price: float = Field(..., serialization_alias="UnitNetPrice")
    unit_gross_price: float = Field(..., serialization_alias="UnitGrossPrice")
    tax: str = Field(..., serialization_alias="Tax")
    unit_tax_value: float = Field(..., serialization_alias="UnitTaxValue")
    category_level2: Optional[str] = Field(None, serialization_alias="CategoryLevel2")
    category_level3: Optional[str] = Field(None, serialization_alias="CategoryLevel3")
    item_id: Optional[str] = Field(None, serialization_alias="ItemId")

    @model_validator(mode="after")
    def validate_item(self) -> "CalculationItem":
        if not self.name:
            raise LeaseLinkApiException("Name is required")
        if self.quantity < 1:
            raise LeaseLinkApiException("Quantity must be greater than 0")
        if not self.category_level1:
            raise LeaseLinkApiException("CategoryLevel1 is required")
        if self.unit_net_price <= 0:
            raise LeaseLinkApiException("UnitNetPrice must be greater than 0")
        if self.unit_gross_price <= 0:
            raise LeaseLinkApiException("UnitGrossPrice must be greater than 0")
        if self.tax not in ALLOWED_TAX_VALUES:
            raise LeaseLinkApiException(
                "Invalid tax value. Allowed values: " + ", ".join(ALLOWED_TAX_VALUES)
            )
        return self

    def to_wire_format(self) -> Dict[str, Any]:
        return self._wire_fields(self.OPTIONAL_FIELDS)


class CalculationOptions(LeaseLinkModel):
    """Calculation-wide settings: multi-offer mode, customer contact data, cart mode."""

    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = (
        "email",
        "phone",
        "tax_id",
        "external_order_id",
    )

    multi_offer: bool = Field(False, serialization_alias="MultiOffer")
    email: Optional[str] = Field(None, serialization_alias="Email")
    phone: Optional[str] = Field(None, serialization_alias="Phone")
    tax_id: Optional[str] = Field(None, serialization_alias="TaxId")
    external_order_id: Optional[str] = Field(None, serialization_alias="ExternalOrderId")
    is_cart_read_only: bool = Field(True, serialization_alias="IsCartReadOnly")

    def to_wire_format(self) -> Dict[str, Any]:
        return self._wire_fields(self.OPTIONAL_FIELDS)
