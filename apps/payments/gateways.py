"""Razorpay and PayU gateway clients."""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests
from django.conf import settings  # type: ignore

from apps.bookings.exceptions import ProviderError

logger = logging.getLogger(__name__)

PAYU_UDF_FIELDS = ("udf1", "udf2", "udf3", "udf4", "udf5")


class RazorpayGateway:
    """Orders API client plus checkout signature verification."""

    def __init__(self, key_id: str, key_secret: str, api_base_url: str, timeout: float = 15) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> dict[str, Any]:
        payload = {"amount": amount_minor, "currency": currency, "receipt": receipt}
        logger.info("Creating Razorpay order %s for %s %s", receipt, amount_minor, currency)

        try:
            response = requests.post(
                f"{self.api_base_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            order = response.json()
        except requests.exceptions.RequestException as exc:
            logger.error("Razorpay order request failed: %s", exc)
            raise ProviderError(f"Could not create payment order: {exc}") from exc
        except ValueError as exc:
            logger.error("Razorpay returned a non-JSON body")
            raise ProviderError("Payment provider returned an invalid response.") from exc

        if not isinstance(order, dict) or not order.get("id"):
            logger.error("Razorpay order response without id: %s", order)
            raise ProviderError("Payment provider did not return an order id.")
        return order

    def signature_for(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not (order_id and payment_id and signature):
            return False
        return hmac.compare_digest(self.signature_for(order_id, payment_id), signature)


class PayUGateway:
    """PayU hosted checkout: request hash for the form post, reverse hash for the response."""

    def __init__(self, merchant_key: str, salt: str, action_url: str) -> None:
        self.merchant_key = merchant_key
        self.salt = salt
        self.action_url = action_url

    @staticmethod
    def _sha512(value: str) -> str:
        return hashlib.sha512(value.encode()).hexdigest()

    def request_hash(self, params: Mapping[str, Any]) -> str:
        parts = [
            self.merchant_key,
            params["txnid"],
            params["amount"],
            params["productinfo"],
            params["firstname"],
            params["email"],
            *(params.get(name, "") for name in PAYU_UDF_FIELDS),
            "", "", "", "", "",
            self.salt,
        ]
        return self._sha512("|".join(str(part) for part in parts))

    def response_hash(self, params: Mapping[str, Any]) -> str:
        parts = [
            self.salt,
            params.get("status", ""),
            "", "", "", "", "",
            *(params.get(name, "") for name in reversed(PAYU_UDF_FIELDS)),
            params.get("email", ""),
            params.get("firstname", ""),
            params.get("productinfo", ""),
            params.get("amount", ""),
            params.get("txnid", ""),
            self.merchant_key,
        ]
        return self._sha512("|".join(str(part) for part in parts))

    def verify_response(self, params: Mapping[str, Any]) -> bool:
        received = params.get("hash") or ""
        if not received:
            return False
        return hmac.compare_digest(self.response_hash(params), received.lower())

    def form_fields(self, params: Mapping[str, Any], *, success_url: str, failure_url: str) -> dict[str, Any]:
        fields = {
            "key": self.merchant_key,
            **{name: params.get(name, "") for name in PAYU_UDF_FIELDS},
            **params,
            "surl": success_url,
            "furl": failure_url,
        }
        fields["hash"] = self.request_hash(fields)
        return fields


@dataclass
class PaymentGateways:
    razorpay: dict[str, RazorpayGateway] = field(default_factory=dict)
    payu: Optional[PayUGateway] = None

    def razorpay_for(self, currency: str) -> RazorpayGateway:
        gateway = self.razorpay.get(currency) or self.razorpay.get("INR")
        if gateway is None:
            raise ProviderError("Razorpay is not configured.")
        return gateway

    def payu_gateway(self) -> PayUGateway:
        if self.payu is None:
            raise ProviderError("PayU is not configured.")
        return self.payu


def build_payment_gateways() -> PaymentGateways:
    """Gateways configured in settings. USD falls back to the INR Razorpay keys."""
    base_url = getattr(settings, "RAZORPAY_API_BASE_URL", "https://api.razorpay.com/v1")
    timeout = getattr(settings, "PAYMENT_HTTP_TIMEOUT", 15)

    razorpay: dict[str, RazorpayGateway] = {}
    key_id = getattr(settings, "RAZORPAY_KEY_ID", "")
    key_secret = getattr(settings, "RAZORPAY_KEY_SECRET", "")
    if key_id and key_secret:
        razorpay["INR"] = RazorpayGateway(key_id, key_secret, base_url, timeout)
        razorpay["USD"] = RazorpayGateway(
            getattr(settings, "RAZORPAY_KEY_ID_USD", "") or key_id,
            getattr(settings, "RAZORPAY_KEY_SECRET_USD", "") or key_secret,
            base_url,
            timeout,
        )

    payu = None
    merchant_key = getattr(settings, "PAYU_MERCHANT_KEY", "")
    salt = getattr(settings, "PAYU_SALT", "")
    if merchant_key and salt:
        payu = PayUGateway(
            merchant_key,
            salt,
            getattr(settings, "PAYU_ACTION_URL", "https://test.payu.in/_payment"),
        )

    return PaymentGateways(razorpay=razorpay, payu=payu)
