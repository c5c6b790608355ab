"""
Health check Lambda function for Sentiment Insights
Reports the API version and whether the Supabase data store is configured and reachable
"""
import logging
from datetime import datetime, timezone

# Import shared utilities
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import config, load_backend_config, ConfiguredBackend
from shared.records import SupabaseRecordSource
from shared.monitoring import lambda_monitor
from shared.xray_config import configure_xray
from shared.error_handling import create_preflight_response, create_success_response

# Configure logging
logger = logging.getLogger()
logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

configure_xray()


def check_database(backend) -> str:
    if not isinstance(backend, ConfiguredBackend):
        return 'not configured'
    return 'healthy' if SupabaseRecordSource(backend).ping() else 'error'


@lambda_monitor(service_name='health-api', environment=config.ENVIRONMENT)
def lambda_handler(event, context):
    """GET /api/health"""
    if event.get('httpMethod') == 'OPTIONS':
        return create_preflight_response()

    try:
        backend = load_backend_config()

        return create_success_response({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'version': config.API_VERSION,
            'services': {
                'database': {'status': check_database(backend)},
                'supabase': {
                    'status': 'configured' if isinstance(backend, ConfiguredBackend) else 'not configured'
                }
            }
        })

    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return create_success_response({
            'status': 'error',
            'message': str(e)
        }, status_code=500)
