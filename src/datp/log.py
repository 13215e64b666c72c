"""Package logger.

datp is a library, so it only attaches a NullHandler. Applications decide
where records go.
"""

import logging

logger = logging.getLogger("datp")
logger.addHandler(logging.NullHandler())
