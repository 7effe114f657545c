# file: loan_expiration/services/expiration_notifier.py

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from loan_expiration.config import DEFAULT_NOTIFICATION_HEADER, DEFAULT_NOTIFICATION_ROUTE, DEFAULT_NOTIFICATION_TITLE
from loan_expiration.errors import DateParseError, DeliveryError
from loan_expiration.models.loan import Loan
from loan_expiration.models.notification import AppNotification, DeliveryResult
from loan_expiration.services.messaging import MessagingClient
from loan_expiration.utils.dates import days_until, format_due_date, parse_return_date

logger = logging.getLogger(__name__)

EXPIRATION_WINDOW_DAYS = 7


def select_expiring(loans: Iterable[Loan], now: datetime,
                    window_days: float = EXPIRATION_WINDOW_DAYS) -> Dict[str, List[Loan]]:
    """
    Groups the loans due within `window_days` of `now` by device token.
    Loans already past their return date are left out, as are loans whose
    return date cannot be parsed.
    """
    loans_by_token: Dict[str, List[Loan]] = {}
    for loan in loans:
        try:
            return_date = parse_return_date(loan.return_date, loan.id)
        except DateParseError as e:
            logger.warning(f"Skipping loan {loan.id}: {e}")
            continue

        days_left = days_until(return_date, now)
        if 0 <= days_left <= window_days:
            loans_by_token.setdefault(loan.device_token, []).append(loan)
    return loans_by_token


def build_notification(token: str, loans: Iterable[Loan],
                       title: str = DEFAULT_NOTIFICATION_TITLE,
                       route: str = DEFAULT_NOTIFICATION_ROUTE,
                       header: str = DEFAULT_NOTIFICATION_HEADER) -> AppNotification:
    body = header if not header or header.endswith("\n") else header + "\n"
    for loan in loans:
        due = format_due_date(parse_return_date(loan.return_date, loan.id))
        body += f"- {loan.applicant} (Due: {due})\n"
    return AppNotification(title=title, body=body, token=token, data={"route": route})


class ExpirationNotifier:
    def __init__(self, client: MessagingClient,
                 title: str = DEFAULT_NOTIFICATION_TITLE,
                 route: str = DEFAULT_NOTIFICATION_ROUTE,
                 header: str = DEFAULT_NOTIFICATION_HEADER,
                 window_days: float = EXPIRATION_WINDOW_DAYS):
        self.client = client
        self.title = title
        self.route = route
        self.header = header
        self.window_days = window_days

    def notify_expiring(self, loans: Iterable[Loan],
                        now: Optional[datetime] = None) -> List[Tuple[str, DeliveryResult]]:
        """
        Sends one notification per device token listing that token's loans
        nearing expiration. A failed send is logged and recorded; the
        remaining tokens are still notified.
        """
        if now is None:
            now = datetime.now().astimezone()

        loans_by_token = select_expiring(loans, now, self.window_days)
        if not loans_by_token:
            logger.info("No loans nearing expiration.")
            return []

        logger.info(f"Found {sum(len(v) for v in loans_by_token.values())} loans nearing expiration "
                    f"across {len(loans_by_token)} devices.")

        results: List[Tuple[str, DeliveryResult]] = []
        for token, token_loans in loans_by_token.items():
            notification = build_notification(token, token_loans, title=self.title, route=self.route, header=self.header)
            try:
                message_id = self.client.send(notification)
            except DeliveryError as e:
                logger.error(f"Failed to send notification to {token}: {e}")
                results.append((token, DeliveryResult(token=token, error=str(e))))
                continue

            logger.info(f"Notification sent to {token}: {message_id}")
            results.append((token, DeliveryResult(token=token, message_id=message_id)))
        return results
