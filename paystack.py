"""
Paystack client

Initialises and verifies transactions against the Paystack REST API. Payment
state is never stored locally; callers get the gateway's payload back.
"""

import logging
from urllib.parse import quote

import requests

import config
from errors import DependencyError

logger = logging.getLogger(__name__)


class PaymentGatewayError(DependencyError):
    """The gateway could not be reached or answered with an error status."""


class PaystackClient:
    def __init__(self, secret, base_url=None, currency=None, callback_url=None, timeout=None):
        self.secret = secret
        self.base_url = (base_url or config.PAYSTACK_BASE_URL).rstrip("/")
        self.currency = currency or config.PAYSTACK_CURRENCY
        self.callback_url = callback_url or config.PAYSTACK_CALLBACK_URL
        self.timeout = timeout or config.PAYSTACK_TIMEOUT

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.secret}"}

    def initialize(self, email, amount):
        """
        Start a transaction.

        ``amount`` is in whole currency units; Paystack expects minor units
        (x100). Returns the gateway response body unchanged.
        """
        payload = {
            "email": email,
            "amount": int(round(amount * 100)),
            "currency": self.currency,
            "callback_url": self.callback_url,
        }
        try:
            response = requests.post(
                f"{self.base_url}/transaction/initialize",
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Paystack initialize failed for %s: %s", email, exc)
            raise PaymentGatewayError("Paystack init failed", details=str(exc)) from exc

        logger.info("Paystack transaction initialised for %s (%s %s)", email, payload["amount"], self.currency)
        return body

    def verify(self, reference):
        """Return the gateway's ``data`` object for a transaction reference."""
        try:
            response = requests.get(
                f"{self.base_url}/transaction/verify/{quote(reference, safe='')}",
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Paystack verify failed for %s: %s", reference, exc)
            raise PaymentGatewayError("Paystack verification failed", details=str(exc)) from exc

        return body.get("data") or {}


def get_paystack():
    return PaystackClient(config.PAYSTACK_SECRET)
