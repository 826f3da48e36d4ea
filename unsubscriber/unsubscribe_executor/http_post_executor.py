"""
HTTP POST Unsubscribe Executor

Implements RFC 8058 one-click unsubscribe: a form-urlencoded POST to the
List-Unsubscribe URL. The body carries the ``List-Unsubscribe=One-Click``
token together with the recipient address.
"""

import requests
from typing import Dict, Any

from ..email_processor.unsubscribe.constants import METHOD_POST
from ..email_processor.unsubscribe.exceptions import NetworkFailure
from ..email_processor.unsubscribe.types import Email, ValidatedCandidate
from .base_executor import BaseUnsubscribeExecutor
from .http_executor import DEFAULT_USER_AGENT, send_request, response_result


class HttpPostExecutor(BaseUnsubscribeExecutor):
    """
    Execute HTTP POST unsubscribe requests.

    Supports:
    - RFC 8058 one-click unsubscribe (List-Unsubscribe-Post header)
    - Rate limiting (inherited from base)
    - Exception capture as failed attempts (inherited from base)
    """

    def __init__(
        self,
        timeout: int = 10,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limit_delay: float = 0.0
    ):
        super().__init__(timeout, rate_limit_delay)
        self.user_agent = user_agent

    @property
    def method_name(self) -> str:
        return METHOD_POST

    @staticmethod
    def build_form(email: Email) -> Dict[str, str]:
        """Form fields for the one-click request."""
        return {
            'List-Unsubscribe': 'One-Click',
            'email': email.recipient or email.sender or ''
        }

    def _perform_execution(self, candidate: ValidatedCandidate, email: Email) -> Dict[str, Any]:
        headers = {
            'User-Agent': self.user_agent,
            'Content-Type': 'application/x-www-form-urlencoded'
        }

        try:
            response = send_request(
                requests.post,
                candidate.url,
                timeout=self.timeout,
                headers=headers,
                data=self.build_form(email)
            )
        except NetworkFailure as e:
            return {
                'success': False,
                'error_message': str(e)
            }
        return response_result(response)
