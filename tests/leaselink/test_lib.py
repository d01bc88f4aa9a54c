import pytest
from unittest.mock import MagicMock

from leaselink.client import LeaseLinkApiClient
from leaselink.config import LeaseLinkConfig
from leaselink.enums import LogLevel, NotificationStatus
from leaselink.exceptions import LeaseLinkApiException
from leaselink.lib import LeaseLink
from leaselink.loggers import LogSink
from leaselink.responses import CalculationResponse, ChosenOfferResponse
from leaselink.schema import CalculationItem, CalculationOptions


TOKEN_BODY = {"Token": "t", "ValidTo": "2099-01-01"}


class FakeResponse:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json_data = json_data
        self.text = str(json_data)

    def json(self):
        return self._json_data


class FakeTransport:
    """Answers session.post() by endpoint suffix and records each request."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers})
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                return response
        return FakeResponse(404, {"errors": [f"No route for {url}"]})


class RecordingLogger(LogSink):
    def __init__(self):
        self.entries = []

    def log(self, level, message, context=None):
        self.entries.append((LogLevel.from_string(level), message, context))

    def find(self, message):
        return [ctx for _, m, ctx in self.entries if m == message]


@pytest.fixture
def config():
    return LeaseLinkConfig(api_key="secret-key", is_test=True)


@pytest.fixture
def sink():
    return RecordingLogger()


@pytest.fixture
def make_leaselink(config, sink):
    def make(routes):
        client = LeaseLinkApiClient(config, logger=sink)
        transport = FakeTransport(routes)
        client.session.post = MagicMock(side_effect=transport)
        return LeaseLink(config, client), transport

    return make


@pytest.fixture
def valid_item(valid_item_fields):
    return CalculationItem(**valid_item_fields)


class TestConstruction:
    @pytest.mark.unit
    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_api_key_is_fatal(self, sink, api_key):
        config = LeaseLinkConfig(api_key=api_key)
        client = LeaseLinkApiClient(config, logger=sink)

        with pytest.raises(LeaseLinkApiException) as e:
            LeaseLink(config, client)

        assert str(e.value) == "API key is required"
        assert sink.find("API key is missing") == [None]

    @pytest.mark.unit
    def test_from_config_builds_client(self, config, sink):
        leaselink = LeaseLink.from_config(config, logger=sink)
        assert isinstance(leaselink.api_client, LeaseLinkApiClient)
        assert leaselink.api_client.logger is sink


class TestCreateCalculation:
    @pytest.mark.unit
    def test_end_to_end(self, make_leaselink, valid_item, calculation_payload):
        leaselink, transport = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/CreateCalculation": FakeResponse(200, calculation_payload),
            }
        )

        response = leaselink.create_calculation([valid_item])

        assert isinstance(response, CalculationResponse)
        assert response.calculation_id == "C1"
        assert response.offers == []
        assert response.get_calculation_url() == "https://onlinetest.leaselink.pl/c/1"

        token_request, calc_request = transport.requests
        assert token_request["json"] == {"ApiKey": "secret-key"}
        assert calc_request["url"] == "https://onlinetest.leaselink.pl/api/CreateCalculation"
        assert calc_request["headers"]["Authorization"] == "Bearer t"
        assert calc_request["json"] == {"Items": [valid_item.to_wire_format()]}

    @pytest.mark.unit
    def test_options_are_merged_into_payload(self, make_leaselink, valid_item, calculation_payload):
        leaselink, transport = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/CreateCalculation": FakeResponse(200, calculation_payload),
            }
        )
        options = CalculationOptions(multi_offer=True, email="test@example.com")

        leaselink.create_calculation([valid_item], options)

        payload = transport.requests[1]["json"]
        assert payload["MultiOffer"] is True
        assert payload["IsCartReadOnly"] is True
        assert payload["Email"] == "test@example.com"
        assert len(payload["Items"]) == 1

    @pytest.mark.unit
    def test_token_failure_propagates_and_logs_items(self, make_leaselink, valid_item, sink):
        leaselink, transport = make_leaselink({"/GetToken": FakeResponse(200, {"Token": "t"})})

        with pytest.raises(LeaseLinkApiException) as e:
            leaselink.create_calculation([valid_item])

        assert str(e.value) == "Invalid token response"
        assert len(transport.requests) == 1
        failure = sink.find("Calculation creation failed")[0]
        assert failure["items"] == [valid_item.to_wire_format()]
        assert failure["options"] is None

    @pytest.mark.unit
    def test_invalid_response_propagates(self, make_leaselink, valid_item, sink):
        leaselink, _ = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/CreateCalculation": FakeResponse(200, {"CalculationId": "X"}),
            }
        )

        with pytest.raises(LeaseLinkApiException) as e:
            leaselink.create_calculation([valid_item], CalculationOptions())

        assert "CalculationUrl" in str(e.value)
        failure = sink.find("Calculation creation failed")[0]
        assert failure["options"] == {"MultiOffer": False, "IsCartReadOnly": True}

    @pytest.mark.unit
    def test_api_error_propagates_unchanged(self, make_leaselink, valid_item):
        leaselink, _ = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/CreateCalculation": FakeResponse(400, {"errors": {"Items": "empty"}}),
            }
        )

        with pytest.raises(LeaseLinkApiException) as e:
            leaselink.create_calculation([valid_item])

        assert e.value.errors == {"Items": "empty"}
        assert e.value.status_code == 400


class TestSaveChosenOffer:
    @pytest.mark.unit
    def test_posts_calculation_id_as_offer_guid(self, make_leaselink):
        leaselink, transport = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/SaveChosenOffer": FakeResponse(200, {"RedirectUrl": "https://x/r"}),
            }
        )

        response = leaselink.save_chosen_offer("C1", "12345")

        assert isinstance(response, ChosenOfferResponse)
        assert response.redirect_url == "https://x/r"
        request = transport.requests[1]
        assert request["url"].endswith("/api/SaveChosenOffer")
        assert request["json"] == {"OfferGuid": "C1", "CalculationPackageId": "12345"}
        assert request["headers"]["Authorization"] == "Bearer t"

    @pytest.mark.unit
    def test_missing_redirect_url_logged_and_raised(self, make_leaselink, sink):
        leaselink, _ = make_leaselink(
            {
                "/GetToken": FakeResponse(200, TOKEN_BODY),
                "/SaveChosenOffer": FakeResponse(200, {}),
            }
        )

        with pytest.raises(LeaseLinkApiException) as e:
            leaselink.save_chosen_offer("C1", "12345")

        assert str(e.value) == "Missing RedirectUrl in response"
        failure = sink.find("Saving chosen offer failed")[0]
        assert failure["offer_guid"] == "C1"
        assert failure["calculation_package_id"] == "12345"


class TestHandleNotification:
    @pytest.mark.unit
    def test_parses_without_network(self, make_leaselink, notification_payload, sink):
        leaselink, transport = make_leaselink({})

        notification = leaselink.handle_notification(notification_payload)

        assert notification.status is NotificationStatus.SIGN_CONTRACT
        assert transport.requests == []
        processed = sink.find("Notification processed")[0]
        assert processed["status"] == "SIGN_CONTRACT"
        assert processed["document"] == "ORDER-123"

    @pytest.mark.unit
    def test_invalid_payload_logged_with_raw_data(self, make_leaselink, notification_payload, sink):
        leaselink, _ = make_leaselink({})
        notification_payload["StatusName"] = "bogus"

        with pytest.raises(LeaseLinkApiException) as e:
            leaselink.handle_notification(notification_payload)

        assert str(e.value) == "Invalid status name"
        failure = sink.find("Notification processing failed")[0]
        assert failure["data"] is notification_payload
