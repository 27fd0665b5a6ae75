"""
Volume Metadata Fetcher - lists the EBS volumes attached to this instance.

Right after boot the network (or DNS) is often not ready yet, e.g.

    dial tcp: lookup ec2.us-west-2.amazonaws.com on [::1]:53: connection refused

so transport failures are retried with exponential backoff and jitter. When
the attempts run out the run aborts; a partial volume list is never returned.
"""

import asyncio
import logging
import sys
from typing import Awaitable, Callable, List, Optional, TextIO

from botocore.exceptions import BotoCoreError, ClientError
from requests import RequestException

from ...core.exceptions import MetadataFetchError, TransientError
from ...models import Volume
from .backoff import Backoff
from .instance_identity import InstanceIdentityProvider

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (BotoCoreError, ClientError, RequestException, TransientError)


class VolumeMetadataFetcher:
    """Fetches attached volumes with bounded retry."""

    def __init__(
        self,
        identity_provider: InstanceIdentityProvider,
        max_attempts: int = 10,
        backoff_min_seconds: float = 0.1,
        backoff_max_seconds: float = 10.0,
        backoff_factor: float = 2.0,
        err: Optional[TextIO] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._identity_provider = identity_provider
        self._max_attempts = max_attempts
        self._backoff_min_seconds = backoff_min_seconds
        self._backoff_max_seconds = backoff_max_seconds
        self._backoff_factor = backoff_factor
        self._err = err
        self._sleep = sleep

    def _new_backoff(self) -> Backoff:
        return Backoff(
            min_seconds=self._backoff_min_seconds,
            max_seconds=self._backoff_max_seconds,
            factor=self._backoff_factor,
            jitter=True,
        )

    async def fetch(self) -> List[Volume]:
        # Retry state belongs to this call only
        backoff = self._new_backoff()
        attempt = 0

        while True:
            attempt += 1
            try:
                volumes = await asyncio.to_thread(self.fetch_once)
            except RETRYABLE_ERRORS as e:
                if attempt >= self._max_attempts:
                    logger.error(
                        f"Giving up on volumes metadata after {attempt} tries: {e}"
                    )
                    raise MetadataFetchError(attempt, str(e)) from e

                delay = backoff.duration()
                self._report_retry(e, delay)
                await self._sleep(delay)
                continue

            logger.info(f"Fetched {len(volumes)} attached volumes (attempt {attempt})")
            return volumes

    def fetch_once(self) -> List[Volume]:
        """Single, blocking attempt: identity lookup plus full pagination."""
        identity = self._identity_provider.get_identity()
        client = self._identity_provider.create_ec2_client(identity)

        paginator = client.get_paginator("describe_volumes")
        filters = [{"Name": "attachment.instance-id", "Values": [identity.instance_id]}]
        volumes: List[Volume] = []

        # The paginator follows NextToken until a page comes back without one
        for page in paginator.paginate(Filters=filters):
            volumes.extend(Volume.from_api(item) for item in page.get("Volumes", []))

        return volumes

    def _report_retry(self, error: Exception, delay: float) -> None:
        err = self._err or sys.stderr
        err.write(
            f"failed to get volumes metadata [{error}], trying again after {delay:.3f}s\n"
        )
        err.flush()
        logger.debug(f"Metadata fetch retry scheduled in {delay:.3f}s", exc_info=error)
