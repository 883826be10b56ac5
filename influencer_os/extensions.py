from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

"""
Flask Extensions - Initialized here, configured in influencer_os/__init__.py

Kept in their own module so models, services and the import script can
share them without importing the app factory.
"""
# Database ORM
# Usage: from influencer_os.extensions import db

db = SQLAlchemy()

# JWT verification - tokens are issued by the hosted auth provider
# Usage: from influencer_os.extensions import jwt

jwt = JWTManager()
