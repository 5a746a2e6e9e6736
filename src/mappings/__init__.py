"""
Mappings module - Contains the column mapping tables of every import source
"""

from .ninjaone_mappings import NINJA_ONE_MAPPINGS, NINJA_ONE_SERVER_MAPPINGS
from .telus_mappings import TELUS_PHONE_MAPPINGS
from .rogers_mappings import ROGERS_PHONE_MAPPINGS
from .template_mappings import TEMPLATE_MAPPINGS

__all__ = [
    "NINJA_ONE_MAPPINGS",
    "NINJA_ONE_SERVER_MAPPINGS",
    "TELUS_PHONE_MAPPINGS",
    "ROGERS_PHONE_MAPPINGS",
    "TEMPLATE_MAPPINGS",
]
