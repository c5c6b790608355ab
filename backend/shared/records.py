"""
Sentiment record sources for the dashboard API.
Serves placeholder rows when no data store is configured, otherwise queries
Supabase (PostgREST) for the sentiment rows joined to a product's posts.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import config, BackendConfig, ConfiguredBackend
from .error_handling import (
    BackendError,
    ErrorCode,
    ErrorDetails,
    handle_backend_error
)
from .xray_config import xray_tracer

logger = logging.getLogger(__name__)

SOURCE_MOCK_DATA = 'mock_data'
SOURCE_SUPABASE = 'supabase_database'

_session = None


def get_session() -> requests.Session:
    """HTTP session shared by every request in a warm container"""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


@dataclass(frozen=True)
class SentimentRecord:
    """One analysed post: its score and extracted keywords"""
    sentiment_score: float = 0.0
    keywords: Optional[Tuple[Any, ...]] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'SentimentRecord':
        """Build a record from a ``sentiment_analysis`` row"""
        keywords = row.get('keywords')
        return cls(
            sentiment_score=_coerce_score(row.get('sentiment_score')),
            keywords=tuple(keywords) if isinstance(keywords, list) else None
        )


def _coerce_score(value: Any) -> float:
    """Missing, null, non-numeric and non-finite scores all count as 0"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(score):
        return 0.0
    return score


class RecordSource:
    """Supplies the sentiment records for one product"""

    source_name = ''

    def fetch_records(self, product_id: str) -> List[SentimentRecord]:
        raise NotImplementedError


class PlaceholderRecordSource(RecordSource):
    """Fixed dataset served while the data store is not configured"""

    source_name = SOURCE_MOCK_DATA

    PLACEHOLDER_ROWS = (
        {'sentiment_score': 0.25, 'keywords': ['everyone', 'whoop 5.0']},
        {'sentiment_score': 0.25, 'keywords': ['monthly subscription']},
    )

    def fetch_records(self, product_id: str) -> List[SentimentRecord]:
        logger.warning("Supabase credentials not configured, returning mock data")
        return [SentimentRecord.from_row(row) for row in self.PLACEHOLDER_ROWS]


class SupabaseRecordSource(RecordSource):
    """Reads sentiment rows through the Supabase REST API"""

    source_name = SOURCE_SUPABASE

    def __init__(self, backend: ConfiguredBackend, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.backend = backend
        self.session = session or get_session()
        self.timeout = timeout if timeout is not None else config.SUPABASE_TIMEOUT_SECONDS
        self.headers = {
            'apikey': backend.key,
            'Authorization': f'Bearer {backend.key}',
            'Accept': 'application/json'
        }

    @property
    def rest_url(self) -> str:
        return f"{self.backend.url}/rest/v1"

    def build_query(self, product_id: str) -> Dict[str, str]:
        """PostgREST parameters for the sentiment/posts inner join"""
        return {
            'select': f'sentiment_score,keywords,{config.POSTS_TABLE}!inner(product_id)',
            f'{config.POSTS_TABLE}.product_id': f'eq.{product_id}'
        }

    @xray_tracer.trace_backend_query('select', config.SENTIMENT_TABLE)
    def fetch_records(self, product_id: str) -> List[SentimentRecord]:
        url = f"{self.rest_url}/{config.SENTIMENT_TABLE}"

        try:
            response = self.session.get(url, params=self.build_query(product_id),
                                        headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            handle_backend_error(e, 'select', config.SENTIMENT_TABLE)

        if not response.ok:
            message = _postgrest_error_message(response)
            logger.error(f"Supabase error: status={response.status_code} message={message}")
            raise BackendError(ErrorDetails(
                code=ErrorCode.BACKEND_QUERY_FAILED,
                message=message,
                details={'status_code': response.status_code}
            ))

        rows = response.json() or []
        logger.info(f"Fetched {len(rows)} sentiment rows for product {product_id}")
        return [SentimentRecord.from_row(row) for row in rows]

    def ping(self) -> bool:
        """Probe the REST root; used by the health check"""
        try:
            response = self.session.get(f"{self.rest_url}/", headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Supabase health probe failed: {e}")
            return False
        return response.ok


def _postgrest_error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get('message'):
        return str(payload['message'])
    return response.text or f"Supabase query failed with status {response.status_code}"


def create_record_source(backend: BackendConfig,
                         session: Optional[requests.Session] = None) -> RecordSource:
    """Pick the record source variant for the given backend configuration"""
    if isinstance(backend, ConfiguredBackend):
        return SupabaseRecordSource(backend, session=session)
    return PlaceholderRecordSource()
