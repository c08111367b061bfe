"""
Production entrypoint for the property dashboard.

Binds to 0.0.0.0:$PORT.
"""

import uvicorn

from utils.config import Config, configure_logging

if __name__ == "__main__":
    config = Config.load()
    configure_logging(config.log_level)

    # Import app here to ensure clean module loading
    from web.app import create_app

    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)
