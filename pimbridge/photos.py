"""
Stores a contact's picture.

The store keeps one base64 encoded picture per contact. A photo can be given as:

    - base64 data (type "base64", or a "data:...;base64," URL)
    - an http(s) URL on a host listed under `photos.allowed_hosts` in
      config.json, fetched with httpx

Anything else (local paths, file:// URLs, other hosts) is not a usable source.
A photo that cannot be decoded or fetched is logged and skipped; it never fails
the save of the contact it belongs to.
"""

import base64
import binascii
from typing import Iterable, Optional
from urllib.parse import urlparse

import httpx

import pimbridge.config as config

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")


class PhotoStore:
    def __init__(self, store, timeout: float = None, allowed_hosts: Optional[Iterable[str]] = None):
        self.store = store
        self.timeout = config.PHOTO_TIMEOUT if timeout is None else timeout
        hosts = config.PHOTO_ALLOWED_HOSTS if allowed_hosts is None else allowed_hosts
        self.allowed_hosts = frozenset(host.lower() for host in hosts)

    def _from_base64(self, value: str) -> str:
        payload = value.split(",", 1)[1] if value.startswith("data:") else value
        payload = "".join(payload.split())
        base64.b64decode(payload, validate=True)
        return payload

    def _from_url(self, url: str) -> str:
        with httpx.Client(timeout=self.timeout, follow_redirects=False) as client:
            response = client.get(url)
            response.raise_for_status()
            return base64.b64encode(response.content).decode("ascii")

    def load(self, encoding_type: Optional[str], value: str) -> Optional[str]:
        """
        Turn a photo value into base64 data.

        Args:
            encoding_type (Optional[str]): The photo's type tag, e.g. "base64" or "url".
            value (str): The photo data or URL.

        Returns:
            Optional[str]: Base64 data, or None if the source cannot be used.
        """
        try:
            if encoding_type == "base64" or value.startswith("data:"):
                return self._from_base64(value)

            parsed = urlparse(value)
            if parsed.scheme in ("http", "https"):
                host = (parsed.hostname or "").lower()
                if host not in self.allowed_hosts:
                    logger.warning(f"Photo host '{host}' is not in photos.allowed_hosts, skipping it.")
                    return None
                return self._from_url(value)

        except (binascii.Error, ValueError) as e:
            logger.warning(f"Photo is not valid base64 data: {e}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Could not fetch photo from {value}: {e}")
            return None

        logger.warning(f"Unrecognized photo source of type '{encoding_type}', skipping it.")
        return None

    def set_picture(self, uid: str, encoding_type: Optional[str], value: str) -> bool:
        """
        Store a picture on the contact with the given uid.

        Returns:
            bool: True if the picture was stored, False if the contact or the photo source was unusable.
        """
        record = self.store.find_by_uid(uid)
        if record is None:
            logger.warning(f"Cannot set picture, contact {uid} not found.")
            return False

        picture = self.load(encoding_type, value)
        if picture is None:
            return False

        record.picture = picture
        self.store.persist(record)
        logger.info(f"Stored picture for contact {uid}.")
        return True
