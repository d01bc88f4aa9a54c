"""
LeaseLink - Python client for the LeaseLink leasing API

This package wraps the LeaseLink online financing API:

1. Create a calculation for a cart and receive financing offers
2. Save the offer the customer picked and get the redirect URL
3. Parse webhook notifications about order status changes

Pricing and offer computation happen on LeaseLink's side; the library
validates inputs, calls one endpoint at a time and returns typed results.

Usage:
------
    from leaselink import (
        CalculationItem,
        CalculationOptions,
        FileLogger,
        LeaseLink,
        LeaseLinkConfig,
    )

    config = LeaseLinkConfig(api_key="your-api-key", is_test=True)
    leaselink = LeaseLink.from_config(config, logger=FileLogger.from_config(config))

    calculation = leaselink.create_calculation(
        [
            CalculationItem(
                name="Laptop",
                quantity=1,
                category_level1="Electronics",
                unit_net_price=1000.00,
                unit_gross_price=1230.00,
                tax="23",
                unit_tax_value=230.00,
            )
        ],
        CalculationOptions(multi_offer=True, email="customer@example.com"),
    )

    offer = calculation.offers[0]
    chosen = leaselink.save_chosen_offer(
        calculation.calculation_id, offer.calculation_package_id
    )
    print(chosen.redirect_url)

Configuration:
--------------
See `leaselink.config` for the LEASELINK_* environment variables read by
`LeaseLinkConfig.from_env()`.
"""

__version__ = "1.0.2"

# -----------------------------------------------------------------------------
# Configuration and enumerations
# -----------------------------------------------------------------------------
from .config import LeaseLinkConfig
from .enums import LogLevel, NotificationStatus, should_log

# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
from .exceptions import LeaseLinkApiException

# -----------------------------------------------------------------------------
# Log sinks
# -----------------------------------------------------------------------------
from .loggers import (
    CompositeLogger,
    FileLogger,
    LogSink,
    NullLogger,
    StandardLogger,
)

# -----------------------------------------------------------------------------
# Request and response models
# -----------------------------------------------------------------------------
from .schema import CalculationItem, CalculationOptions
from .responses import (
    CalculationOffer,
    CalculationResponse,
    ChosenOfferResponse,
    NotificationData,
)

# -----------------------------------------------------------------------------
# API client and facade
# -----------------------------------------------------------------------------
from .client import LeaseLinkApiClient
from .lib import LeaseLink


__all__ = [
    "__version__",
    # Configuration
    "LeaseLinkConfig",
    "LogLevel",
    "NotificationStatus",
    "should_log",
    # Errors
    "LeaseLinkApiException",
    # Log sinks
    "LogSink",
    "NullLogger",
    "StandardLogger",
    "FileLogger",
    "CompositeLogger",
    # Models
    "CalculationItem",
    "CalculationOptions",
    "CalculationOffer",
    "CalculationResponse",
    "ChosenOfferResponse",
    "NotificationData",
    # Client
    "LeaseLinkApiClient",
    "LeaseLink",
]
