"""
HTTP GET Unsubscribe Executor

Requests the unsubscribe URL with a descriptive User-Agent. Any 2xx
response counts as a successful unsubscribe.
"""

import requests
from typing import Dict, Any

from ..email_processor.unsubscribe.constants import METHOD_GET
from ..email_processor.unsubscribe.exceptions import NetworkFailure
from ..email_processor.unsubscribe.types import Email, ValidatedCandidate
from .base_executor import BaseUnsubscribeExecutor

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; UnsubscribeBot/1.0)'


def send_request(send, url: str, timeout: int, **kwargs) -> requests.Response:
    """Call requests.get/requests.post, translating transport errors into NetworkFailure."""
    try:
        return send(url, timeout=timeout, allow_redirects=True, **kwargs)
    except requests.exceptions.Timeout:
        raise NetworkFailure(f'Request timed out after {timeout} seconds', url=url)
    except requests.exceptions.ConnectionError as e:
        raise NetworkFailure(f'Connection error: {e}', url=url)
    except requests.exceptions.RequestException as e:
        raise NetworkFailure(f'Request failed: {e}', url=url)


def response_result(response: requests.Response) -> Dict[str, Any]:
    """Map a response onto the executor result dict."""
    success = 200 <= response.status_code < 300
    result = {
        'success': success,
        'status_code': response.status_code
    }
    if not success:
        result['error_message'] = f'HTTP {response.status_code}'
    return result


class HttpGetExecutor(BaseUnsubscribeExecutor):
    """Execute unsubscribe requests via HTTP GET method."""

    def __init__(
        self,
        timeout: int = 10,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limit_delay: float = 0.0
    ):
        """
        Initialize HTTP GET executor.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header for requests
            rate_limit_delay: Delay in seconds between requests
        """
        super().__init__(timeout, rate_limit_delay)
        self.user_agent = user_agent

    @property
    def method_name(self) -> str:
        return METHOD_GET

    def _perform_execution(self, candidate: ValidatedCandidate, email: Email) -> Dict[str, Any]:
        try:
            response = send_request(
                requests.get,
                candidate.url,
                timeout=self.timeout,
                headers={'User-Agent': self.user_agent}
            )
        except NetworkFailure as e:
            return {
                'success': False,
                'error_message': str(e)
            }
        return response_result(response)
