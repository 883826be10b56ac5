import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()


class Config:
    # Database - the hosted provider hands this out as DATABASE_URL
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///influencer_os.db')

    # Fix for postgres:// vs postgresql://
    if SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv('SECRET_KEY')

    # Tokens are minted by the hosted auth provider, we only verify them
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '24')))
    JWT_DECODE_AUDIENCE = os.getenv('JWT_DECODE_AUDIENCE') or None

    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',')]

    # Pagination for list endpoints
    DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', '50'))
    MAX_PAGE_SIZE = int(os.getenv('MAX_PAGE_SIZE', '200'))

    # Spreadsheet migration (migrate_excel.py)
    IMPORT_WORKBOOK_PATH = os.getenv('IMPORT_WORKBOOK_PATH', 'data/Miss Jones UGC Coordination.xlsx')
    IMPORT_BRAND_ID = os.getenv('IMPORT_BRAND_ID', '8d77ae33-02c6-49cc-958f-5daac9dd621a')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'test-jwt-secret-key-that-is-long-enough-for-hs256'
    JWT_DECODE_AUDIENCE = None
    CORS_ORIGINS = ['*']
