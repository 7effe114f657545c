import pytest

from loan_expiration.errors import DeliveryError


class RecordingMessagingClient:
    """Stands in for the push provider. Tokens listed in `failing` raise DeliveryError."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []
        self.attempted = []

    def send(self, notification):
        self.attempted.append(notification)
        if notification.token in self.failing:
            raise DeliveryError("provider unavailable", token=notification.token)
        self.sent.append(notification)
        return f"projects/test/messages/{len(self.sent)}"


@pytest.fixture
def messaging_client_factory():
    return RecordingMessagingClient
