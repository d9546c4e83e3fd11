"""
FPL Gateway - entry point and convenience re-exports.

Code lives in fpl_gateway/ modules:
- config.py:      ProxyConfig / ClientConfig, read from environment
- constants.py:   Upstream location, gameweek bounds, cache windows, planner tables
- models.py:      Cache directive, resource descriptor, upstream schemas
- resources.py:   Registry of the 11 relayed FPL resources
- cache.py:       ResponseCache (explicit TTL store)
- validation.py:  Route parameter checks
- services.py:    Upstream HTTP client and the read-through relay
- endpoints.py:   FastAPI app factory + all proxy routes
- client.py:      FPLService, the client data-access layer
- loaders.py:     Stateful loaders (single, dependent-sequence, polling)
- helpers.py:     Fixture and gameweek derivations
- selection.py:   Saved team selection store

Tests import from `main`.
"""

import logging

from fpl_gateway.config import *       # noqa: F401,F403
from fpl_gateway.constants import *    # noqa: F401,F403
from fpl_gateway.errors import *       # noqa: F401,F403
from fpl_gateway.models import *       # noqa: F401,F403
from fpl_gateway.resources import *    # noqa: F401,F403
from fpl_gateway.cache import *        # noqa: F401,F403
from fpl_gateway.validation import *   # noqa: F401,F403
from fpl_gateway.services import *     # noqa: F401,F403
from fpl_gateway.client import *       # noqa: F401,F403
from fpl_gateway.loaders import *      # noqa: F401,F403
from fpl_gateway.helpers import *      # noqa: F401,F403
from fpl_gateway.selection import *    # noqa: F401,F403
from fpl_gateway.endpoints import app, create_app  # noqa: F401

if __name__ == "__main__":
    import os
    import uvicorn

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
