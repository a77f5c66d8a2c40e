import asyncio
import httpx
import logging
from typing import List, Dict, Optional

from core.errors import ProbeFailure
from models.report import DnsRecordSet

DEFAULT_DOH_ENDPOINT = "https://dns.google/resolve"

# Default DNS timeout (in seconds)
DEFAULT_DNS_TIMEOUT = 5.0

# Record types queried for every target, with their numeric RR type codes
RECORD_TYPES = {"A": 1, "MX": 15, "NS": 2, "TXT": 16}

logger = logging.getLogger(__name__)


async def query_doh(
    client: httpx.AsyncClient,
    hostname: str,
    record_type: str,
    endpoint: str = DEFAULT_DOH_ENDPOINT,
) -> List[str]:
    """
    Resolves one record type through a DNS-over-HTTPS JSON endpoint.

    Returns the `data` field of every answer of the requested type.

    Raises:
        ProbeFailure: on network error, non-200 status or a malformed payload
    """
    try:
        response = await client.get(
            endpoint,
            params={"name": hostname, "type": record_type},
            headers={"Accept": "application/dns-json"},
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ProbeFailure(f"DNS {record_type}", hostname, f"{type(e).__name__}: {e}") from e

    if response.status_code != 200:
        raise ProbeFailure(f"DNS {record_type}", hostname, f"HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise ProbeFailure(f"DNS {record_type}", hostname, "response is not JSON") from e
    if not isinstance(payload, dict):
        raise ProbeFailure(f"DNS {record_type}", hostname, "response is not a JSON object")

    answers = payload.get("Answer") or []
    if not isinstance(answers, list):
        raise ProbeFailure(f"DNS {record_type}", hostname, "Answer is not a list")

    expected_type = RECORD_TYPES.get(record_type)
    records: List[str] = []
    for answer in answers:
        if not isinstance(answer, dict) or answer.get("data") is None:
            continue
        # Skip CNAME hops and other types the resolver includes in the chain
        answer_type = answer.get("type")
        if isinstance(answer_type, int) and expected_type and answer_type != expected_type:
            continue
        records.append(str(answer["data"]))
    return records


async def get_dns_records(
    hostname: str,
    timeout: Optional[float] = None,
    endpoint: str = DEFAULT_DOH_ENDPOINT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DnsRecordSet:
    """
    Gets A, MX, NS and TXT records for a hostname, all four concurrently.

    A failed lookup leaves only its own record type empty.

    Args:
        hostname: The hostname to query
        timeout: Per-lookup timeout in seconds (default: 5s)
        endpoint: DNS-over-HTTPS JSON endpoint
        transport: Optional httpx transport (tests pass a MockTransport)
    """
    timeout = timeout or DEFAULT_DNS_TIMEOUT
    logger.debug(f"DNS query for {hostname}: {list(RECORD_TYPES)} via {endpoint}")

    async def lookup(client: httpx.AsyncClient, record_type: str) -> List[str]:
        try:
            records = await asyncio.wait_for(
                query_doh(client, hostname, record_type, endpoint),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.debug(f"DNS {record_type} {hostname}: no records (timeout after {timeout}s)")
            return []
        except ProbeFailure as e:
            logger.debug(f"DNS {record_type} {hostname}: no records ({e.reason})")
            return []
        logger.debug(f"DNS {record_type} {hostname}: {len(records)} records")
        return records

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        results = await asyncio.gather(*(lookup(client, rt) for rt in RECORD_TYPES))

    records: Dict[str, List[str]] = dict(zip(RECORD_TYPES, results))
    return DnsRecordSet(
        a_records=tuple(records["A"]),
        mx_records=tuple(records["MX"]),
        ns_records=tuple(records["NS"]),
        txt_records=tuple(records["TXT"]),
    )
