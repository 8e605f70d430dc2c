import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # App settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-in-production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///unwind.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Recordings live in a private subdirectory of the documents directory
    DOCUMENTS_DIR = os.getenv('UNWIND_DOCUMENTS_DIR', os.path.join(os.path.expanduser('~'), '.unwind'))
    RECORDINGS_SUBDIRECTORY = 'UnwindRecordings'
    AUDIO_FILE_EXTENSION = 'm4a'
    MICROPHONE_PERMISSION = os.getenv('MICROPHONE_PERMISSION', 'undetermined')
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

    # Unreferenced recordings younger than this may belong to an unsaved draft
    ORPHAN_GRACE_SECONDS = int(os.getenv('ORPHAN_GRACE_SECONDS', 3600))

    # Listing
    ENTRIES_PER_PAGE = 10

class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URI', 'sqlite:///unwind-dev.db')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    MICROPHONE_PERMISSION = 'granted'
    ORPHAN_GRACE_SECONDS = 0

class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///unwind.db')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
