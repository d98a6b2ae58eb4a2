# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Flask application.
# Uses environment variables for sensitive data to keep them out of version control.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # --- File Upload Configuration ---
    # Sales exports are stored here only while they are being validated.
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'instance/uploads')

    ALLOWED_EXTENSIONS = {'.xlsx', '.csv'}

    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- Commission Rates ---
    # None uses the built-in tables; set a CommissionConfig to replace them.
    COMMISSION_CONFIG = None


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = 'DEBUG'
