"""TLS certificate handling for calls to the Calendar API.

Python ships its own CA bundle, which misses enterprise root certificates
installed in the operating system store. ``truststore`` makes the ``ssl``
module (and therefore ``requests``) verify against the native store instead.
"""

import logging
import platform

import truststore

logger = logging.getLogger(__name__)

_ssl_initialized = False


def init_ssl(enabled: bool = True) -> bool:
    """
    Inject the OS certificate store into Python's SSL context.

    Must run before the first HTTPS connection is opened.

    Args:
        enabled: Skip injection entirely when False

    Returns:
        True if the native trust store is in use
    """
    global _ssl_initialized

    if _ssl_initialized:
        return True
    if not enabled:
        logger.debug("Native trust store disabled, using bundled CA certificates")
        return False

    try:
        truststore.inject_into_ssl()
    except Exception as e:
        logger.warning(f"Failed to inject truststore on {platform.system()}: {e}")
        return False

    _ssl_initialized = True
    logger.debug(f"SSL truststore injected for {platform.system()}")
    return True
