import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration"""

    # Database
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///hashvault.db')

    # Filesystem byte store (used when S3_BUCKET is not set)
    STORAGE_BASE_PATH = os.getenv('STORAGE_BASE_PATH', '.hashvault/objects')

    # S3
    AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
    AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
    S3_BUCKET = os.getenv('S3_BUCKET')

    # Collaborating services
    AUTH_SERVICE_URL = os.getenv('AUTH_SERVICE_URL')
    REPOSITORY_SERVICE_URL = os.getenv('REPOSITORY_SERVICE_URL')
    CONTENT_SERVICE_URL = os.getenv('CONTENT_SERVICE_URL')
    SERVICE_TIMEOUT = float(os.getenv('SERVICE_TIMEOUT', '5'))

    # Uploads larger than this are rejected with 413
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(50 * 1024 * 1024)))

    # Flask
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_ENV') == 'development'
    PORT = int(os.getenv('PORT', '5001'))
