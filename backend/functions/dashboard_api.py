"""
Insights Dashboard Lambda function for Sentiment Insights
Aggregates a product's sentiment analysis rows into the dashboard payload
"""
import logging
import time
from typing import Dict, Any, Optional

# Import shared utilities
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import config, load_backend_config
from shared.aggregation import aggregate_sentiment
from shared.records import create_record_source
from shared.monitoring import lambda_monitor, log_api_call, performance_monitor
from shared.xray_config import configure_xray
from shared.error_handling import (
    create_error_response,
    create_preflight_response,
    create_success_response,
    validate_product_id,
    SentimentInsightsException
)

# Configure logging
logger = logging.getLogger()
logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

configure_xray()

DASHBOARD_PLATFORM = 'all'
DASHBOARD_TIMEFRAME = '30d'


def extract_product_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Product id from ``?productId=``, then the ``{productId}`` route parameter,
    then the last segment of the request path.
    """
    query_params = event.get('queryStringParameters') or {}
    product_id = query_params.get('productId')
    if product_id:
        return product_id

    path_params = event.get('pathParameters') or {}
    product_id = path_params.get('productId')
    if product_id:
        return product_id

    # Legacy callers put the id at the end of the URL
    path = event.get('path') or ''
    return path.split('/')[-1].split('?')[0] or None


class DashboardAPI:
    """Dashboard API handler class"""

    def __init__(self, session=None):
        # Optional requests.Session shared by live record sources
        self.session = session

    def get_dashboard(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the product id, load its records and aggregate them"""
        product_id = validate_product_id(extract_product_id(event))

        record_source = create_record_source(load_backend_config(), session=self.session)
        records = record_source.fetch_records(product_id)

        dashboard = aggregate_sentiment(records)

        logger.info(f"Dashboard built for product {product_id}: "
                    f"{dashboard.sentiment.total_posts} posts from {record_source.source_name}")
        performance_monitor.put_business_metric('DashboardRequests', 1, product_id, record_source.source_name)
        performance_monitor.put_business_metric('PostsAggregated', dashboard.sentiment.total_posts,
                                                product_id, record_source.source_name)

        return create_success_response({
            'success': True,
            'dashboard': dashboard.to_dict(),
            'productId': product_id,
            'platform': DASHBOARD_PLATFORM,
            'timeframe': DASHBOARD_TIMEFRAME,
            'source': record_source.source_name
        })

# Initialize API handler
dashboard_api = DashboardAPI()

@lambda_monitor(service_name='dashboard-api', environment=config.ENVIRONMENT)
def lambda_handler(event, context):
    """
    Main Lambda handler for GET /api/insights/dashboard
    OPTIONS pre-flight requests are answered before any other work
    """
    start_time = time.time()
    http_method = event.get('httpMethod', 'GET')
    path = event.get('path', '')
    request_id = context.aws_request_id if context else 'unknown'

    if http_method == 'OPTIONS':
        return create_preflight_response()

    product_id = None
    try:
        product_id = extract_product_id(event)
        result = dashboard_api.get_dashboard(event)

        execution_time = (time.time() - start_time) * 1000
        log_api_call('dashboard-api', path, http_method, result['statusCode'], execution_time, product_id)
        return result

    except SentimentInsightsException as e:
        execution_time = (time.time() - start_time) * 1000
        log_api_call('dashboard-api', path, http_method, e.status_code, execution_time, product_id)
        return create_error_response(e, request_id)

    except Exception as e:
        logger.error(f"Dashboard error: {str(e)}")
        execution_time = (time.time() - start_time) * 1000
        log_api_call('dashboard-api', path, http_method, 500, execution_time, product_id)
        return create_error_response(e, request_id)
