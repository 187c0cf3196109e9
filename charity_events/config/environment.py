"""Deployment environment for the events API, the web client and the seed script.

Importing this module loads .env, so import it before anything that reads
settings from os.environ. Hosted deployments set ENVIRONMENT=production
and their variables directly instead of shipping a .env file.
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

VALID_ENVIRONMENTS = ('development', 'production')

env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in VALID_ENVIRONMENTS:
    logging.warning(
        f"ENVIRONMENT={env_setting!r} is not one of {', '.join(VALID_ENVIRONMENTS)}; "
        "running as development."
    )

__all__ = ['IS_PRODUCTION_ENVIRONMENT']
