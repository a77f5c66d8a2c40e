"""
Transport-neutral request handling for the analysis engine.

A serving layer passes the HTTP method and raw request body to
`handle_request` and writes back the returned status, headers and body.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from core.engine import Engine
from core.errors import InvalidInputError
from core.report import serialize_report

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
JSON_HEADERS = {**CORS_HEADERS, "Content-Type": "application/json"}

MISSING_URL_MESSAGE = "URL is required"
GENERIC_FAILURE_MESSAGE = "Failed to analyze URL"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResponse:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


def _error(status: int, message: str) -> ServiceResponse:
    return ServiceResponse(status=status, headers=dict(JSON_HEADERS), body=json.dumps({"error": message}))


async def handle_request(
    method: str,
    body: Union[str, bytes, None],
    engine: Optional[Engine] = None,
) -> ServiceResponse:
    """
    Answer one analysis request.

    - OPTIONS: empty 200 with permissive CORS headers
    - no `url` in the JSON body: 400 {"error": "URL is required"}
    - unusable URL: 400 with the normalizer's message
    - anything else going wrong: 500 {"error": <message>}
    - success: 200 with the full report
    """
    if method.upper() == "OPTIONS":
        return ServiceResponse(status=200, headers=dict(CORS_HEADERS), body=None)

    try:
        payload = json.loads(body) if body else {}
        url = payload.get("url") if isinstance(payload, dict) else None
        if not url:
            return _error(400, MISSING_URL_MESSAGE)

        report = await (engine or Engine()).analyze(url)
        return ServiceResponse(status=200, headers=dict(JSON_HEADERS), body=json.dumps(serialize_report(report)))
    except InvalidInputError as e:
        logger.info(f"Rejected analysis request: {e}")
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Analysis error")
        return _error(500, str(e) or GENERIC_FAILURE_MESSAGE)
