"""Events API entry point."""

import os

import uvicorn

from charity_events.config.environment import IS_PRODUCTION_ENVIRONMENT
from charity_events.api.app import app

if __name__ == "__main__":
    port = int(os.environ.get("API_PORT", 8000))
    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - reload requires the import string
        uvicorn.run(
            "charity_events.api.app:app",
            host="127.0.0.1",
            port=port,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - use string reference for proper multi-worker support
        uvicorn.run(
            "charity_events.api.app:app",
            host="0.0.0.0",
            port=port,
            reload=False,
            workers=int(os.environ.get("API_WORKERS", 4)),
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
