"""
Configuration module for loading environment variables.

This module loads environment variables from .env file and exposes
configuration values used by the import transformations.
"""

import os
from dotenv import load_dotenv
load_dotenv()

# Target fields starting with this prefix are routed to custom fields
CUSTOM_FIELD_PREFIX = os.getenv("CUSTOM_FIELD_PREFIX", "cf_")

# Organisation prefix for numeric asset tags (e.g. "1234" -> "BGC001234")
ASSET_TAG_PREFIX = os.getenv("ASSET_TAG_PREFIX", "BGC").strip().upper()

# Windows domain stripped from RMM usernames ("BGC\\jdoe" -> "jdoe")
DIRECTORY_DOMAIN = os.getenv("DIRECTORY_DOMAIN", "BGC").strip()
