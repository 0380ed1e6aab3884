import asyncio
from typing import Optional

import requests

from gpuwatch.shared.logger import Logger

logger = Logger.get(__name__)


class HealthChecker:
    """
    Utility class for liveness checks against upstream HTTP services.
    """

    @staticmethod
    async def check_http_endpoint(url: str, timeout: float = 5.0, expected_status: Optional[int] = 200) -> bool:
        """
        Check if an HTTP endpoint is responding.

        Args:
            url: Full URL of the endpoint to probe
            timeout: Request timeout in seconds
            expected_status: Status code that counts as healthy; None accepts any HTTP response

        Returns:
            True if the endpoint answers with the expected status, False otherwise
        """
        try:
            response = await asyncio.to_thread(
                requests.get, url, timeout=timeout,
            )
        except Exception as e:
            logger.debug(f"Health check failed for {url}: {e}")
            return False

        if expected_status is None or response.status_code == expected_status:
            logger.debug(f"Health check passed for {url}: status {response.status_code}")
            return True
        logger.warning(f"Health check failed for {url}: status {response.status_code}")
        return False
