# config.py

import os
from dotenv import load_dotenv

# Get the base directory of the application
basedir = os.path.abspath(os.path.dirname(__file__))

# Loads the .env file from the repository root.
load_dotenv(os.path.join(basedir, '..', '.env'))


class Config:
    """
    Contains all the configuration variables for the application,
    including database, identity provider and matchmaking settings.
    """
    # --- Database Settings ---
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'after8.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Secret Key ---
    SECRET_KEY = os.environ.get('SECRET_KEY')

    PORT = int(os.environ.get('PORT') or 5000)

    # --- Supabase (identity provider) ---
    # JWT secret verifies bearer tokens; the service role key is used for
    # admin user management (create/update/delete in Supabase Auth).
    SUPABASE_URL = os.environ.get('SUPABASE_URL')
    SUPABASE_JWT_SECRET = os.environ.get('SUPABASE_JWT_SECRET')
    SUPABASE_SERVICE_ROLE_KEY = os.environ.get('SUPABASE_SERVICE_ROLE_KEY')

    # --- CORS ---
    FRONTEND_URL = os.environ.get('FRONTEND_URL')
    FRONTEND_LOCAL_URL = os.environ.get('FRONTEND_LOCAL_URL') or 'http://localhost:5173'

    # --- Roles ---
    USER_ROLES = ('USER', 'ADMIN', 'MARKETING')
    DEFAULT_ROLE = 'USER'

    # --- Matchmaking ---
    # Ordered from highest to lowest. A score belongs to the first band
    # whose lower bound it reaches.
    MATCH_SCORE_BANDS = (
        ('90-100', 90),
        ('80-90', 80),
        ('70-80', 70),
        ('60-70', 60),
        ('50-60', 50),
        ('below-50', 0),
    )

    # --- Gamification ---
    LEVEL_POINTS_PER_DINNER = 10
    LEVEL_POINTS_PER_BADGE = 5


class TestConfig(Config):
    """In-memory database and a fixed JWT secret for the test suite."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret-key'
    SUPABASE_URL = 'https://example.supabase.co'
    SUPABASE_JWT_SECRET = 'test-jwt-secret-with-enough-length-for-hs256'
    SUPABASE_SERVICE_ROLE_KEY = 'test-service-role-key'
    FRONTEND_URL = 'http://localhost:3000'
