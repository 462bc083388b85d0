"""
Environment configuration for Sradha's Notes
"""
import os
from pathlib import Path
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')
load_dotenv()

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'sradha_notes')

# JWT Configuration
JWT_SECRET = os.environ.get('JWT_SECRET', 'sradha_notes_secret_key_2024_change_me')
JWT_ALGORITHM = 'HS256'
TOKEN_TTL_DAYS = 30
AUTH_REQUIRED = os.environ.get('AUTH_REQUIRED', 'true').lower() == 'true'

# HTTP server
FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:5173')
PORT = int(os.environ.get('PORT', 5000))
APP_ENV = os.environ.get('APP_ENV', 'production')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# Media host (Cloudinary)
CLOUDINARY_URL = os.environ.get('CLOUDINARY_URL')
CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME')
CLOUDINARY_API_KEY = os.environ.get('CLOUDINARY_API_KEY')
CLOUDINARY_API_SECRET = os.environ.get('CLOUDINARY_API_SECRET')
MEDIA_FOLDER = os.environ.get('MEDIA_FOLDER', 'sradha-notes')

# The one and only account
VALID_USERNAME = 'sradha'
VALID_PASSWORD = 'iloveyou'
DISPLAY_NAME = 'Sradha Priyadarshini'


def is_development() -> bool:
    return APP_ENV.lower() == 'development'
