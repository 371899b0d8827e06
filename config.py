import os


def request_body_limit(upload_mb):
    # base64 JSON bodies run about 4/3 of the file size, plus the metadata fields
    return upload_mb * 1024 * 1024 * 4 // 3 + 64 * 1024


class Config:
    # Base configuration
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    TESTING = False

    # Quality gate thresholds
    MIN_TEXT_LENGTH = int(os.getenv('MIN_TEXT_LENGTH', 100))
    MIN_ASCII_RATIO = float(os.getenv('MIN_ASCII_RATIO', 0.85))
    MIN_ALNUM_RATIO = float(os.getenv('MIN_ALNUM_RATIO', 0.5))

    # OCR
    OCR_DPI = int(os.getenv('OCR_DPI', 300))
    OCR_PSM = int(os.getenv('OCR_PSM', 6))
    OCR_OEM = int(os.getenv('OCR_OEM', 3))
    OCR_LANG = os.getenv('OCR_LANG', 'eng')
    TESSERACT_CMD = os.getenv('TESSERACT_CMD')

    # Uploads
    MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', 5))
    # Flask refuses larger request bodies before they are read
    MAX_CONTENT_LENGTH = request_body_limit(MAX_UPLOAD_MB)
    MAX_WORKERS = int(os.getenv('MAX_WORKERS', min(8, os.cpu_count() or 2)))

    # File storage
    RESUME_STORAGE_PATH = os.getenv('RESUME_STORAGE_PATH', 'data/resumes')

class DevelopmentConfig(Config):  # Note: Capital 'D' and 'C'
    DEBUG = True
    ENV = 'development'

    # Local storage paths
    RESUME_STORAGE_PATH = 'data/resumes'

class TestingConfig(Config):
    TESTING = True
    ENV = 'testing'
    RESUME_STORAGE_PATH = os.getenv('RESUME_STORAGE_PATH', 'data/test_resumes')

class ProductionConfig(Config):  # Note: Capital 'P' and 'C'
    DEBUG = False
    ENV = 'production'

    # AWS Configuration
    AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')

    # S3 Configuration
    S3_BUCKET = os.getenv('S3_BUCKET', 'resume-ingestion-data')

    # Update storage paths for S3
    RESUME_STORAGE_PATH = f's3://{S3_BUCKET}/analyses/'
