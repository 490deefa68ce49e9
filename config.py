# Configuration settings
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=30)
    JWT_TOKEN_LOCATION = ['headers', 'cookies']
    JWT_ACCESS_COOKIE_NAME = 'jwt'
    JWT_COOKIE_CSRF_PROTECT = False

    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 10))

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', 'uploads')
    # Per-file 5MB limit is enforced in uploads.py; leave room for multipart overhead
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024 + 64 * 1024

    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Settings create_app() refuses to start without
    REQUIRED_SETTINGS = ()

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    DEBUG = False


class DevelopmentConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///blogsy.db')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', 'development-only-secret-key-do-not-deploy')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')
    DEBUG = True


class ProductionConfig(Config):
    JWT_COOKIE_SECURE = True
    REQUIRED_SETTINGS = ('SQLALCHEMY_DATABASE_URI', 'JWT_SECRET_KEY')
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    BCRYPT_LOG_ROUNDS = 4
    LOG_LEVEL = 'WARNING'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
