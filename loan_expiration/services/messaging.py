# file: loan_expiration/services/messaging.py

"""
Push delivery providers.

The notifier only needs an object with `send(notification) -> delivery id`.
Two providers are available: Firebase Cloud Messaging through the Admin SDK
(the default) and Expo's Push API.
"""

import logging
import os
from typing import Optional, Protocol

import firebase_admin
import httpx
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from loan_expiration.config import JobConfig
from loan_expiration.errors import ConfigurationError, DeliveryError
from loan_expiration.models.notification import AppNotification

logger = logging.getLogger(__name__)

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"


class MessagingClient(Protocol):
    def send(self, notification: AppNotification) -> str:
        ...


class FirebaseMessagingClient:
    def __init__(self, credentials_file: str, app: Optional[firebase_admin.App] = None):
        self.app = app or self._initialize_app(credentials_file)

    @staticmethod
    def _initialize_app(credentials_file: str) -> firebase_admin.App:
        # Reuse the default app if something already initialized it in this process
        if firebase_admin._apps:
            return firebase_admin.get_app()

        if not credentials_file or not os.path.isfile(credentials_file):
            raise ConfigurationError(f"Firebase credential file not found: {credentials_file!r}")
        try:
            cred = credentials.Certificate(credentials_file)
            app = firebase_admin.initialize_app(cred)
        except (ValueError, OSError) as e:
            raise ConfigurationError(f"Could not initialize Firebase Admin SDK from {credentials_file!r}: {e}") from e
        logger.info("Firebase Admin SDK initialized.")
        return app

    def send(self, notification: AppNotification) -> str:
        message = messaging.Message(
            token=notification.token,
            notification=messaging.Notification(
                title=notification.title,
                body=notification.body,
            ),
            data=notification.data or {},
        )
        try:
            return messaging.send(message, app=self.app)
        except (FirebaseError, ValueError) as e:
            raise DeliveryError(f"Firebase rejected notification: {e}", token=notification.token) from e


class ExpoMessagingClient:
    def __init__(self, client: Optional[httpx.Client] = None, push_url: str = EXPO_PUSH_URL):
        self._client = client or httpx.Client(timeout=10.0)
        self.push_url = push_url

    def send(self, notification: AppNotification) -> str:
        headers = {
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
            'Content-Type': 'application/json',
        }
        payload = {
            'to': notification.token,
            'sound': 'default',
            'title': notification.title,
            'body': notification.body,
            'data': notification.data,
            'channelId': 'default',  # Required for custom Android notification channels
        }

        try:
            response = self._client.post(self.push_url, json=payload, headers=headers)
            response.raise_for_status()
            ticket = response.json().get("data")
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"Expo server responded with {e.response.status_code}: {e.response.text}",
                token=notification.token,
            ) from e
        except httpx.RequestError as e:
            raise DeliveryError(f"Could not reach Expo push service: {e}", token=notification.token) from e
        except (ValueError, AttributeError) as e:
            raise DeliveryError(f"Unreadable Expo push response: {e}", token=notification.token) from e

        # A single message may still come back as a one-item ticket list
        if isinstance(ticket, list):
            ticket = ticket[0] if ticket else None
        if not isinstance(ticket, dict):
            raise DeliveryError(f"Unexpected Expo push ticket: {ticket!r}", token=notification.token)

        if ticket.get("status") != "ok":
            details = ticket.get("details")
            error_type = details.get("error", "") if isinstance(details, dict) else ""
            raise DeliveryError(
                f"Expo push returned error {error_type or 'unknown'}: {ticket.get('message', '')}",
                token=notification.token,
            )
        return ticket.get("id") or ""

    def close(self) -> None:
        self._client.close()


def build_messaging_client(config: JobConfig) -> MessagingClient:
    if config.messaging_provider == "firebase":
        return FirebaseMessagingClient(config.credentials_file)
    if config.messaging_provider == "expo":
        return ExpoMessagingClient()
    raise ConfigurationError(f"Unknown messaging provider '{config.messaging_provider}'")
