import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'wishkeeper-default-secret')

    DB_HOST = os.getenv('DB_HOST', 'localhost')
    DB_PORT = int(os.getenv('DB_PORT', 3306))
    DB_USER = os.getenv('DB_USER', 'root')
    DB_PASSWORD = os.getenv('DB_PASSWORD', '')
    DB_NAME = os.getenv('DB_NAME', 'wishkeeper')

    # Bounded pool; callers wait up to DB_ACQUIRE_TIMEOUT seconds for a free connection
    DB_POOL_NAME = os.getenv('DB_POOL_NAME', 'wishkeeper')
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', 10))
    DB_ACQUIRE_TIMEOUT = float(os.getenv('DB_ACQUIRE_TIMEOUT', 10))

    APP_TIMEZONE = os.getenv('APP_TIMEZONE', 'Europe/Copenhagen')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    PORT = int(os.getenv('PORT', 5000))


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = 'DEBUG'
