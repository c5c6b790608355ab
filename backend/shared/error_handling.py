"""
Error handling utilities for the Sentiment Insights Lambda functions.
Provides standardized JSON envelopes, CORS headers and application exceptions.
"""

import json
import logging
from typing import Dict, Any, Optional, Union
from enum import Enum
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, PUT, DELETE, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization'
}

PRODUCT_ID_REQUIRED_MESSAGE = 'Product ID is required'

class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Validation Errors
    MISSING_REQUIRED_FIELD = "VAL_001"

    # Data store Errors
    BACKEND_QUERY_FAILED = "DB_001"
    BACKEND_UNREACHABLE = "DB_002"

    # System Errors
    INTERNAL_SERVER_ERROR = "SYS_001"

@dataclass
class ErrorDetails:
    """Structured error details."""
    code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public failure envelope."""
        return {
            'success': False,
            'error': self.message
        }

class SentimentInsightsException(Exception):
    """Base exception class for the Sentiment Insights application."""

    def __init__(self, error_details: ErrorDetails, status_code: int = 500):
        self.error_details = error_details
        self.status_code = status_code
        super().__init__(error_details.message)

class ValidationError(SentimentInsightsException):
    """Input validation errors."""

    def __init__(self, error_details: ErrorDetails):
        super().__init__(error_details, 400)

class BackendError(SentimentInsightsException):
    """Data store query errors."""

    def __init__(self, error_details: ErrorDetails):
        super().__init__(error_details, 500)

def response_headers() -> Dict[str, str]:
    headers = {'Content-Type': 'application/json'}
    headers.update(CORS_HEADERS)
    return headers

def create_success_response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """Create standardized success response."""
    return {
        'statusCode': status_code,
        'headers': response_headers(),
        'body': json.dumps(body)
    }

def create_preflight_response() -> Dict[str, Any]:
    """Empty 200 response for CORS pre-flight requests."""
    return {
        'statusCode': 200,
        'headers': response_headers(),
        'body': ''
    }

def create_error_response(error: Union[SentimentInsightsException, Exception],
                         request_id: Optional[str] = None) -> Dict[str, Any]:
    """Create standardized error response."""

    if isinstance(error, SentimentInsightsException):
        status_code = error.status_code
        error_body = error.error_details.to_dict()
        log_data = {
            'error_type': type(error).__name__,
            'code': error.error_details.code.value,
            'message': str(error),
            'request_id': request_id,
            'details': error.error_details.details or {}
        }
        logger.error(f"APPLICATION_ERROR: {json.dumps(log_data, default=str)}")
    else:
        # Unexpected exceptions still surface their message
        status_code = 500
        error_body = ErrorDetails(
            code=ErrorCode.INTERNAL_SERVER_ERROR,
            message=str(error)
        ).to_dict()

        logger.error(f"Unexpected error: {str(error)} request_id={request_id}", exc_info=True)

    return {
        'statusCode': status_code,
        'headers': response_headers(),
        'body': json.dumps(error_body)
    }

def validate_product_id(product_id: Optional[str]) -> str:
    """Validate that a product identifier was supplied."""
    if not product_id:
        raise ValidationError(ErrorDetails(
            code=ErrorCode.MISSING_REQUIRED_FIELD,
            message=PRODUCT_ID_REQUIRED_MESSAGE,
            details={'missing_fields': ['productId']}
        ))
    return product_id

def handle_backend_error(error: Exception, operation: str, table_name: str) -> None:
    """Convert data store failures to application errors carrying the original message."""
    error_message = str(error)
    logger.error(f"Data store error in {operation} on {table_name}: {error_message}")

    raise BackendError(ErrorDetails(
        code=ErrorCode.BACKEND_UNREACHABLE,
        message=error_message,
        details={'operation': operation, 'table_name': table_name}
    )) from error
