"""
API endpoints package
"""

from . import health
from . import listings
from . import analytics
