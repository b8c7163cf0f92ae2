# voucherdesk/config.py

import os
import logging

# --- API Configuration ---
API_BASE_URL = os.environ.get("VOUCHERDESK_API_URL", "http://127.0.0.1:8000/api/v1")
API_TOKEN = os.environ.get("VOUCHERDESK_API_TOKEN") or None
TENANT_SLUG = os.environ.get("VOUCHERDESK_TENANT") or None
REQUEST_TIMEOUT = float(os.environ.get("VOUCHERDESK_REQUEST_TIMEOUT", "30"))  # seconds

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# --- Directory lookup (typeahead) ---
SEARCH_MIN_LENGTH = 2
SEARCH_DEBOUNCE_MS = 500

# --- Invoice list defaults ---
DEFAULT_PER_PAGE = 20
DEFAULT_SORT = "voucher_date"
DEFAULT_DIRECTION = "desc"

# --- Logging Configuration ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # voucherdesk/ -> project root
LOGS_DIR = os.environ.get("VOUCHERDESK_LOGS_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE_NAME = "voucherdesk.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'level': logging.DEBUG,
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024*1024*5,  # 5 MB
            'backupCount': 5,
            'level': logging.INFO,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': logging.DEBUG,
    },
}

