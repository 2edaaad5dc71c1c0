import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    """Base configuration class."""

    # Flask Configuration
    SECRET_KEY = os.environ.get('FLASK_SECRET_KEY')
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'
    PORT = int(os.environ.get('FLASK_RUN_PORT', 7071))

    # Error responses include exception details only when this is set
    EXPOSE_ERROR_DETAILS = os.environ.get('EXPOSE_ERROR_DETAILS', 'False').lower() == 'true'

    # SQLAlchemy Configuration
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    def __init__(self):
        """Initialize configuration with proper database URL conversion."""
        db_url = os.environ.get('DATABASE_URL')
        if not db_url:
            raise ValueError("DATABASE_URL environment variable is not set")

        if db_url.startswith('postgres://'):
            db_url = db_url.replace('postgres://', 'postgresql://', 1)

        self.SQLALCHEMY_DATABASE_URI = db_url

    # Cache Configuration
    CACHE_TYPE = "SimpleCache"
    CACHE_DEFAULT_TIMEOUT = 300

    # Pagination
    API_DEFAULT_PAGE_SIZE = 20
    API_MAX_PAGE_SIZE = 100

    # Blob storage (S3)
    AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
    S3_BUCKET_NAME = os.environ.get('S3_BUCKET_NAME')

    @classmethod
    def validate_required_vars(cls) -> list[str]:
        """Validate that all required environment variables are set."""
        required_vars = [
            'FLASK_SECRET_KEY',
            'DATABASE_URL',
            'S3_BUCKET_NAME',
        ]

        missing_vars = []
        for var in required_vars:
            if not os.environ.get(var):
                missing_vars.append(var)

        return missing_vars

class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    EXPOSE_ERROR_DETAILS = True
    CACHE_TYPE = "SimpleCache"

class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    CACHE_TYPE = "SimpleCache"  # Consider Redis for production

class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    CACHE_TYPE = "SimpleCache"

    def __init__(self):
        test_db_url = os.environ.get('TEST_DATABASE_URL')
        if test_db_url:
            self.SQLALCHEMY_DATABASE_URI = test_db_url
        else:
            # Use SQLite in-memory for local tests if not specified
            self.SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
