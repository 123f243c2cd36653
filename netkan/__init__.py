__version__ = "0.1.0"

from netkan.exceptions import NetkanError
from netkan.models import Metadata
from netkan.services import CachingHttpService

__all__ = ["__version__", "NetkanError", "Metadata", "CachingHttpService"]
