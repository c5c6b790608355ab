"""
AWS X-Ray configuration and utilities for the Sentiment Insights Lambda functions.
"""

import os
import logging
from functools import wraps
from typing import Optional
from aws_xray_sdk import global_sdk_config
from aws_xray_sdk.core import xray_recorder, patch

from .config import config

logger = logging.getLogger(__name__)

_configured = False

# Configure X-Ray recorder
def configure_xray(service_name: Optional[str] = None):
    """Configure the X-Ray recorder once per container."""
    global _configured
    if _configured:
        return

    service_name = service_name or os.environ.get('AWS_LAMBDA_FUNCTION_NAME', config.PROJECT_NAME)

    if not config.TRACING_ENABLED:
        global_sdk_config.set_sdk_enabled(False)

    xray_recorder.configure(
        service=service_name,
        context_missing='LOG_ERROR'
    )

    # Outgoing Supabase calls go through requests
    patch(('requests',))

    _configured = True
    logger.info(f"X-Ray configured for service: {service_name}")

class XRayTracer:
    """X-Ray tracing helpers."""

    def __init__(self, service_name: str):
        self.service_name = service_name

    def trace_backend_query(self, operation: str, table_name: str):
        """Create a subsegment around a data store query."""
        def decorator(func):
            @wraps(func)
            def wrapper(source, product_id, *args, **kwargs):
                subsegment_name = f"db_{operation}_{table_name}"

                with xray_recorder.in_subsegment(subsegment_name) as subsegment:
                    if subsegment:
                        # Annotations are indexed for filtering
                        subsegment.put_annotation('operation', operation)
                        subsegment.put_annotation('table_name', table_name)
                        subsegment.put_annotation('product_id', str(product_id))
                        subsegment.put_annotation('service', self.service_name)
                        subsegment.namespace = 'remote'

                    try:
                        result = func(source, product_id, *args, **kwargs)

                        if subsegment:
                            subsegment.put_metadata('status', 'success', 'database')
                            subsegment.put_metadata('result_count', len(result), 'database')

                        return result

                    except Exception as e:
                        if subsegment:
                            subsegment.put_metadata('error', {
                                'type': type(e).__name__,
                                'message': str(e)
                            }, 'database')
                        # The context manager records the exception itself
                        raise

            return wrapper
        return decorator

# Global tracer instance
xray_tracer = XRayTracer(config.PROJECT_NAME)
