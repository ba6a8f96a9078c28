import unittest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from app.application.interfaces.payment_gateway import GatewayCallStatus
from app.domain.entities.payment import PaymentKind
from app.infrastructure.gateways import signature
from app.infrastructure.gateways.payment_gateway_http import PaymentGatewayHTTP

CLIENT_PATH = "app.infrastructure.gateways.payment_gateway_http.httpx.AsyncClient"


def _response(status_code=200, data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    resp.text = str(data)
    return resp


def _client(mock_client_cls, response=None, side_effect=None):
    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    if side_effect is not None:
        mock_client.post.side_effect = side_effect
    else:
        mock_client.post.return_value = response
    mock_client_cls.return_value = mock_client
    return mock_client


class TestPaymentGatewayHTTP(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.gateway = PaymentGatewayHTTP(
            terminal_key="TERM",
            secret="secret",
            base_url="https://gw.test/v2/",
            backend_url="https://api.test",
            breaker_fail_max=3,
        )

    @patch(CLIENT_PATH)
    async def test_authorize_rental_success(self, mock_client_cls):
        mock_client = _client(
            mock_client_cls,
            _response(data={"Success": True, "PaymentId": 777, "PaymentURL": "https://pay/777", "Status": "NEW"}),
        )

        result = await self.gateway.authorize("rental-bk1-abc", Decimal("800"), PaymentKind.RENTAL, "user-1", "Rental")

        self.assertEqual(result.status, GatewayCallStatus.SUCCESS)
        self.assertEqual(result.gateway_payment_id, "777")
        self.assertEqual(result.redirect_url, "https://pay/777")
        self.assertEqual(result.provider_status, "NEW")

        args, kwargs = mock_client.post.call_args
        self.assertEqual(args[0], "https://gw.test/v2/Init")
        body = kwargs["json"]
        self.assertEqual(body["TerminalKey"], "TERM")
        self.assertEqual(body["Amount"], 80000)
        self.assertEqual(body["PayType"], "O")
        self.assertEqual(body["NotificationURL"], "https://api.test/api/v1/payments/webhook")
        self.assertTrue(signature.verify(body, "secret"))

    @patch(CLIENT_PATH)
    async def test_deposit_is_two_stage(self, mock_client_cls):
        mock_client = _client(mock_client_cls, _response(data={"Success": True, "PaymentId": "9", "Status": "NEW"}))

        await self.gateway.authorize("deposit-bk1-abc", Decimal("5000"), PaymentKind.DEPOSIT_HOLD, "user-1", "Hold")

        body = mock_client.post.call_args.kwargs["json"]
        self.assertEqual(body["PayType"], "T")
        self.assertEqual(body["Amount"], 500000)

    @patch(CLIENT_PATH)
    async def test_unsuccessful_response_is_rejected(self, mock_client_cls):
        _client(
            mock_client_cls,
            _response(data={"Success": False, "ErrorCode": "1051", "Message": "Insufficient funds"}),
        )

        result = await self.gateway.capture("9", Decimal("1000"))

        self.assertEqual(result.status, GatewayCallStatus.REJECTED)
        self.assertEqual(result.error_code, "1051")
        self.assertEqual(result.error_message, "Insufficient funds")

    @patch(CLIENT_PATH)
    async def test_non_json_response_is_rejected(self, mock_client_cls):
        resp = _response(status_code=400)
        resp.json.side_effect = ValueError("no json")
        _client(mock_client_cls, resp)

        result = await self.gateway.cancel("9")

        self.assertEqual(result.status, GatewayCallStatus.REJECTED)
        self.assertEqual(result.error_code, "HTTP_400")

    @patch(CLIENT_PATH)
    async def test_timeout_is_unavailable(self, mock_client_cls):
        _client(mock_client_cls, side_effect=httpx.ReadTimeout("timed out"))

        result = await self.gateway.query_status("9")

        self.assertEqual(result.status, GatewayCallStatus.UNAVAILABLE)
        self.assertEqual(result.error_code, "TIMEOUT")

    @patch(CLIENT_PATH)
    async def test_server_error_is_unavailable(self, mock_client_cls):
        resp = _response(status_code=503)
        resp.raise_for_status.side_effect = httpx.HTTPStatusError("503", request=MagicMock(), response=resp)
        _client(mock_client_cls, resp)

        result = await self.gateway.cancel("9")

        self.assertEqual(result.status, GatewayCallStatus.UNAVAILABLE)
        self.assertEqual(result.error_code, "HTTP_ERROR")

    @patch(CLIENT_PATH)
    async def test_circuit_opens_after_repeated_failures(self, mock_client_cls):
        mock_client = _client(mock_client_cls, side_effect=httpx.ConnectError("refused"))

        results = [await self.gateway.query_status("9") for _ in range(4)]

        self.assertEqual([r.status for r in results], [GatewayCallStatus.UNAVAILABLE] * 4)
        self.assertEqual(results[-1].error_code, "CIRCUIT_OPEN")
        self.assertEqual(mock_client.post.call_count, 3)

    def test_verify_notification(self):
        payload = signature.with_token({"TerminalKey": "TERM", "PaymentId": "9", "Status": "CONFIRMED"}, "secret")

        self.assertTrue(self.gateway.verify_notification(payload))
        self.assertFalse(self.gateway.verify_notification({**payload, "Status": "REJECTED"}))

    def test_verify_notification_rejects_other_terminal(self):
        payload = signature.with_token({"TerminalKey": "OTHER", "PaymentId": "9"}, "secret")

        self.assertFalse(self.gateway.verify_notification(payload))


if __name__ == "__main__":
    unittest.main()
