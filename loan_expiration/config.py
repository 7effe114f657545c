# file: loan_expiration/config.py

import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from loan_expiration.errors import ConfigurationError

DEFAULT_CREDENTIALS_FILE = "./hubapp.json"
DEFAULT_NOTIFICATION_TITLE = "Loans nearing expiration"
DEFAULT_NOTIFICATION_ROUTE = "/ptd/loans"
DEFAULT_NOTIFICATION_HEADER = ""


class JobConfig(BaseModel):
    """Settings for one run of the loan expiration job.

    Built once at process entry and handed to the fetcher, the messaging
    client factory and the notifier.
    """
    api_url: str
    api_key: str
    credentials_file: Optional[str] = DEFAULT_CREDENTIALS_FILE
    messaging_provider: Literal["firebase", "expo"] = "firebase"
    notification_title: str = DEFAULT_NOTIFICATION_TITLE
    notification_route: str = DEFAULT_NOTIFICATION_ROUTE
    notification_header: str = DEFAULT_NOTIFICATION_HEADER
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "JobConfig":
        if load_dotenv_file:
            load_dotenv()

        api_url = os.getenv("API_URL")
        api_key = os.getenv("API_KEY")
        if not api_url:
            raise ConfigurationError("API_URL not set in environment")
        if not api_key:
            raise ConfigurationError("API_KEY not set in environment")

        provider = os.getenv("MESSAGING_PROVIDER", "firebase").strip().lower()
        if provider not in ("firebase", "expo"):
            raise ConfigurationError(f"Unknown MESSAGING_PROVIDER '{provider}' (expected 'firebase' or 'expo')")

        return cls(
            api_url=api_url,
            api_key=api_key,
            credentials_file=os.getenv("FIREBASE_CREDENTIALS", DEFAULT_CREDENTIALS_FILE),
            messaging_provider=provider,
            notification_title=os.getenv("NOTIFICATION_TITLE") or DEFAULT_NOTIFICATION_TITLE,
            notification_route=os.getenv("NOTIFICATION_ROUTE") or DEFAULT_NOTIFICATION_ROUTE,
            notification_header=os.getenv("NOTIFICATION_HEADER", DEFAULT_NOTIFICATION_HEADER),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
