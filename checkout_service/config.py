import os
from dotenv import load_dotenv

load_dotenv() # Optional: Load .env file

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8003")) # Port for this service

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Convert buy-unit quantities into the product's sale unit when adding items
UNIT_CONVERSION_ENABLED = os.getenv("UNIT_CONVERSION_ENABLED", "true").lower() in ("1", "true", "yes")

# Converted quantities are stored with this many decimals, totals with the second
QUANTITY_DECIMAL_PLACES = int(os.getenv("QUANTITY_DECIMAL_PLACES", "3"))
TOTAL_DECIMAL_PLACES = int(os.getenv("TOTAL_DECIMAL_PLACES", "2"))
