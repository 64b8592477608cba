"""
Configuration for the pimbridge service.

Attributes:
    CONTACTS_DB (str): Path to the SQLite database file holding the contact store.
    PHOTO_TIMEOUT (float): Seconds to wait when fetching a contact photo from a URL.
    PHOTO_ALLOWED_HOSTS (list): Hosts a contact photo URL may be fetched from; none by default.
    TRACING_ENABLED (bool): Whether to instrument the app with OpenTelemetry.
"""

from shared.config import get_config

_config = get_config()

CONTACTS_DB                             = _config["db"]["contacts"]
PHOTO_TIMEOUT                           = float(_config["photos"]["timeout"])
PHOTO_ALLOWED_HOSTS                     = list(_config["photos"]["allowed_hosts"])
TRACING_ENABLED                         = bool(_config["tracing_enabled"])
