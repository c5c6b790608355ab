"""
Configuration settings for the Sentiment Insights backend
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Application configuration"""
    
    # Environment
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'dev')
    PROJECT_NAME = os.getenv('PROJECT_NAME', 'sentiment-insights')
    API_VERSION = os.getenv('API_VERSION', '1.0.0')
    
    # AWS Configuration
    AWS_REGION = os.getenv('AWS_REGION', 'us-west-2')
    
    # Supabase tables
    SENTIMENT_TABLE = os.getenv('SENTIMENT_TABLE', 'sentiment_analysis')
    POSTS_TABLE = os.getenv('POSTS_TABLE', 'posts')
    SUPABASE_TIMEOUT_SECONDS = float(os.getenv('SUPABASE_TIMEOUT_SECONDS', '10'))
    
    # Observability
    TRACING_ENABLED = _env_flag('TRACING_ENABLED', 'true')
    METRICS_ENABLED = _env_flag('METRICS_ENABLED', 'false')
    
    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    
    @classmethod
    def validate(cls) -> bool:
        """Validate configuration required by the live data store"""
        required_vars = [
            'SUPABASE_URL',
            'SUPABASE_ANON_KEY'
        ]
        
        missing_vars = [var for var in required_vars if not os.getenv(var)]
        
        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")
        
        return True


@dataclass(frozen=True)
class ConfiguredBackend:
    """Credentials for the Supabase REST endpoint"""
    url: str
    key: str


@dataclass(frozen=True)
class UnconfiguredBackend:
    """No data store configured; placeholder data is served"""


BackendConfig = Union[ConfiguredBackend, UnconfiguredBackend]


def load_backend_config(environ: Optional[Mapping[str, str]] = None) -> BackendConfig:
    """
    Read the data store credentials.
    Called per request so a missing URL or key always selects placeholder data.
    """
    if environ is None:
        environ = os.environ
    
    url = (environ.get('SUPABASE_URL') or '').strip()
    key = (environ.get('SUPABASE_ANON_KEY') or '').strip()
    
    if not url or not key:
        return UnconfiguredBackend()
    
    return ConfiguredBackend(url=url.rstrip('/'), key=key)

# Create global config instance
config = Config()
