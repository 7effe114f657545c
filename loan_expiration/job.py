# file: loan_expiration/job.py

"""
Loan expiration job: fetch the loan list once, then push a reminder to every
device with loans due within the next seven days.

Meant to run on a schedule (e.g. daily from cron):

    python main.py
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from loan_expiration.config import JobConfig
from loan_expiration.errors import ConfigurationError, FetchError
from loan_expiration.models.notification import DeliveryResult
from loan_expiration.services.expiration_notifier import ExpirationNotifier
from loan_expiration.services.loan_fetcher import LoanFetcher
from loan_expiration.services.messaging import MessagingClient, build_messaging_client
from loan_expiration.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def run_job(config: JobConfig, client: MessagingClient,
                  fetcher: Optional[LoanFetcher] = None,
                  now: Optional[datetime] = None) -> List[Tuple[str, DeliveryResult]]:
    fetcher = fetcher or LoanFetcher(config)
    loans = await fetcher.fetch_loans()
    logger.info(f"Fetched {len(loans)} loans.")

    notifier = ExpirationNotifier(client, title=config.notification_title, route=config.notification_route,
                                  header=config.notification_header)
    results = notifier.notify_expiring(loans, now=now)

    failed = sum(1 for _, result in results if not result.ok)
    logger.info(f"Run finished: {len(results) - failed} notifications sent, {failed} failed.")
    return results


def main(now: Optional[datetime] = None) -> int:
    setup_logging()
    try:
        config = JobConfig.from_env()
        setup_logging(config.log_level)
        client = build_messaging_client(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info(f"[{datetime.now()}] Running loan expiration check...")
    try:
        asyncio.run(run_job(config, client, now=now))
    except (ConfigurationError, FetchError) as e:
        logger.error(f"Error fetching loans: {e}")
        return 1
    finally:
        close = getattr(client, "close", None)
        if close is not None:
            close()
    return 0
