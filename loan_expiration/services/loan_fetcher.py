# file: loan_expiration/services/loan_fetcher.py

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from loan_expiration.config import JobConfig
from loan_expiration.errors import ConfigurationError, DecodeError, HTTPStatusError, TransportError
from loan_expiration.models.loan import Loan, LoansResponse

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class LoanFetcher:
    """Retrieves the current loan list from the loans API.

    One GET per call, authenticated with the `x-api-key` header. There are no
    retries and no pagination: a failed fetch aborts the run and the next
    scheduled run tries again.
    """

    def __init__(self, config: JobConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = client

    async def fetch_loans(self) -> List[Loan]:
        if not self.config.api_url:
            raise ConfigurationError("API_URL not set in environment")
        if not self.config.api_key:
            raise ConfigurationError("API_KEY not set in environment")

        headers = {API_KEY_HEADER: self.config.api_key}
        try:
            if self._client is not None:
                response = await self._client.get(self.config.api_url, headers=headers)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(self.config.api_url, headers=headers)
        except httpx.RequestError as e:
            raise TransportError(f"Could not reach loans API at {self.config.api_url}: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise HTTPStatusError(
                f"failed to fetch loans: status {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            envelope = LoansResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DecodeError(f"Unexpected loans API response body: {e}") from e

        logger.debug(
            f"Loans API reported success={envelope.success} count={envelope.count} message={envelope.message!r}")
        return envelope.data


async def fetch_loans(config: JobConfig, client: Optional[httpx.AsyncClient] = None) -> List[Loan]:
    return await LoanFetcher(config, client=client).fetch_loans()
