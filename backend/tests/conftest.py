"""
Shared pytest setup for the backend tests
"""
import os
import sys

# No X-Ray daemon outside Lambda
os.environ.setdefault('AWS_XRAY_SDK_ENABLED', 'false')
os.environ.setdefault('AWS_XRAY_CONTEXT_MISSING', 'LOG_ERROR')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
