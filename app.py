#!/usr/bin/env python3
"""
Flask REST API for Turn Router.

Uses environment variables for configuration (see turn_router.config_loader).
"""
import logging
import os

from dotenv import load_dotenv

from turn_router.web import create_app

# Load environment variables
load_dotenv()

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

app = create_app(secret_key=os.environ.get("FLASK_SECRET_KEY"))


if __name__ == "__main__":
    port = int(os.getenv("PORT", 7860))
    # Disable debug mode for production
    app.run(host="0.0.0.0", port=port, debug=False)
