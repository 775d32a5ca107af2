import logging
import os

import azure.functions as func

from functions.timer.quote_availability_timer import bp as quote_availability_timer_bp
from functions.timer.token_refresh_timer import bp as token_refresh_timer_bp
from shared.config import validate_monitor_config
from shared.init_tables import init_tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ==================== CONFIGURATION ====================
# Validate app settings before anything else

validate_monitor_config()

# ==================== TABLE INITIALIZATION ====================
# Make sure the fixture table exists so lookups fail with "not found" instead of a table error

try:
    logger.info("Initializing Azure Table Storage tables...")
    results = init_tables()

    if results["created"]:
        logger.info(
            f"Created {len(results['created'])} tables: {', '.join(results['created'])}")
    if results["already_exists"]:
        logger.info(f"{len(results['already_exists'])} tables already exist")
    if results["failed"]:
        logger.warning(
            f"Failed to create {len(results['failed'])} tables - fixture lookups may fail")

except Exception as e:
    logger.warning(
        f"Table initialization failed: {e} - continuing without table initialization")

# ==================== REGISTER FUNCTIONS ====================

app = func.FunctionApp()

if (os.getenv('AZURE_FUNCTIONS_ENVIRONMENT') != 'Testing'):
    app.register_functions(token_refresh_timer_bp)  # Login-SetToken, every 45 minutes
    app.register_functions(quote_availability_timer_bp)  # Quote-Availability-Monitor, every minute

logger.info("Function app initialization complete!")
