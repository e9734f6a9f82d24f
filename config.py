import os

from fieldreports.errors import ConfigurationError


def _optional_float(name):
    value = os.environ.get(name)
    return float(value) if value else None


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('FIELD_REPORTS_SECRET') or 'dev-secret-key'
    DEBUG = os.environ.get('FIELD_REPORTS_DEBUG', 'true').lower() in ('1', 'true', 'yes')
    PORT = int(os.environ.get('FIELD_REPORTS_PORT', '5002'))
    CORS_ORIGINS = os.environ.get('FIELD_REPORTS_CORS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Account store
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DB_NAME = 'fieldreports.db'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        f"sqlite:///{os.path.join(BASE_DIR, DB_NAME)}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_LIFETIME_HOURS = int(os.environ.get('SESSION_LIFETIME_HOURS', '8'))

    # Upstream spreadsheet endpoint
    SHEETS_ENDPOINT_URL = os.environ.get('SHEETS_ENDPOINT_URL')
    SHEETS_TIMEOUT = _optional_float('SHEETS_TIMEOUT')
    ROW_LAYOUT = int(os.environ.get('ROW_LAYOUT', '35'))

class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True

class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False

    @property
    def SECRET_KEY(self):
        key = os.environ.get('FIELD_REPORTS_SECRET')
        if not key:
            raise ConfigurationError("FIELD_REPORTS_SECRET environment variable is required in production")
        return key

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        url = os.environ.get('DATABASE_URL')
        if not url:
            raise ConfigurationError("DATABASE_URL environment variable is required in production")
        return url

class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SHEETS_ENDPOINT_URL = 'https://sheets.example.test/exec'
    ROW_LAYOUT = 35

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
