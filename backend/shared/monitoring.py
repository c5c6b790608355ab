"""
Monitoring and logging utilities for the Sentiment Insights Lambda functions.
Provides structured request logging, X-Ray subsegments and CloudWatch custom metrics.
"""

import json
import time
import logging
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Dict, Any, Optional, Callable
import boto3
from aws_xray_sdk.core import xray_recorder

from .config import config
from .error_handling import create_error_response

# Configure structured logging
logger = logging.getLogger()
logger.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(handler)

_cloudwatch = None

def get_cloudwatch_client():
    """CloudWatch client, created on first use."""
    global _cloudwatch
    if _cloudwatch is None:
        _cloudwatch = boto3.client('cloudwatch', region_name=config.AWS_REGION)
    return _cloudwatch

class PerformanceMonitor:
    """Performance monitoring and metrics collection."""

    def __init__(self, service_name: str, environment: str, enabled: Optional[bool] = None):
        self.service_name = service_name
        self.environment = environment
        self.namespace = f"SentimentInsights/{environment}"
        self.enabled = config.METRICS_ENABLED if enabled is None else enabled

    def put_metric(self, metric_name: str, value: float, unit: str = 'Count',
                   dimensions: Optional[Dict[str, str]] = None):
        """Put custom metric to CloudWatch."""
        if not self.enabled:
            return

        try:
            metric_data = {
                'MetricName': metric_name,
                'Value': value,
                'Unit': unit,
                'Timestamp': datetime.now(timezone.utc)
            }

            if dimensions:
                metric_data['Dimensions'] = [
                    {'Name': k, 'Value': v} for k, v in dimensions.items()
                ]

            get_cloudwatch_client().put_metric_data(
                Namespace=self.namespace,
                MetricData=[metric_data]
            )

        except Exception as e:
            logger.error(f"Failed to put metric {metric_name}: {str(e)}")

    def put_business_metric(self, metric_name: str, value: float,
                           product_id: Optional[str] = None,
                           source: Optional[str] = None):
        """Put business-specific metrics with common dimensions."""
        dimensions = {
            'Service': self.service_name,
            'Environment': self.environment
        }

        if product_id:
            dimensions['ProductId'] = product_id
        if source:
            dimensions['Source'] = source

        self.put_metric(metric_name, value, dimensions=dimensions)

def lambda_monitor(service_name: str, environment: str = 'dev'):
    """
    Decorator for Lambda handler monitoring.
    Logs request start/end, times the invocation and wraps it in an X-Ray subsegment.
    Exceptions that escape the handler become a 500 failure envelope.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
            start_time = time.time()
            performance_monitor = PerformanceMonitor(service_name, environment)

            request_id = getattr(context, 'aws_request_id', None) or 'unknown'
            event = event or {}

            with xray_recorder.in_subsegment(f'{service_name}_handler') as subsegment:
                try:
                    logger.info("REQUEST_START: " + json.dumps({
                        'request_id': request_id,
                        'service': service_name,
                        'event_type': event.get('httpMethod', 'unknown'),
                        'path': event.get('path', 'unknown')
                    }))

                    if subsegment:
                        subsegment.put_annotation('service', service_name)
                        subsegment.put_annotation('environment', environment)
                        if 'httpMethod' in event:
                            subsegment.put_annotation('http_method', event['httpMethod'])

                    result = func(event, context)

                    execution_time = (time.time() - start_time) * 1000
                    status_code = result.get('statusCode', 200) if isinstance(result, dict) else 200

                    logger.info("REQUEST_SUCCESS: " + json.dumps({
                        'request_id': request_id,
                        'service': service_name,
                        'execution_time_ms': execution_time,
                        'status_code': status_code
                    }))

                    performance_monitor.put_metric('ExecutionTime', execution_time, 'Milliseconds')

                    if subsegment:
                        subsegment.put_metadata('execution_time_ms', execution_time)
                        subsegment.put_metadata('status_code', status_code)

                    return result

                except Exception as e:
                    execution_time = (time.time() - start_time) * 1000

                    logger.error("REQUEST_ERROR: " + json.dumps({
                        'request_id': request_id,
                        'service': service_name,
                        'error_type': type(e).__name__,
                        'error_message': str(e),
                        'execution_time_ms': execution_time,
                        'traceback': traceback.format_exc()
                    }))

                    performance_monitor.put_metric('Errors', 1)

                    if subsegment:
                        subsegment.put_metadata('status', 'error')

                    return create_error_response(e, request_id)

        return wrapper
    return decorator

def log_api_call(api_name: str, endpoint: str, method: str, status_code: int,
                execution_time_ms: float, product_id: Optional[str] = None):
    """Log API calls with status-dependent severity."""
    log_data = {
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'api_name': api_name,
        'endpoint': endpoint,
        'method': method,
        'status_code': status_code,
        'execution_time_ms': execution_time_ms,
        'product_id': product_id
    }

    if status_code < 400:
        logger.info(f"API_CALL: {json.dumps(log_data)}")
    elif status_code < 500:
        logger.warning(f"API_CALL_CLIENT_ERROR: {json.dumps(log_data)}")
    else:
        logger.error(f"API_CALL_SERVER_ERROR: {json.dumps(log_data)}")

# Global instance for easy access
performance_monitor = PerformanceMonitor(config.PROJECT_NAME, config.ENVIRONMENT)
