"""
Configuration settings for the Rental Utility Splitter
"""
import os

# Application Settings
APP_TITLE = "Rental Utility Splitter"
APP_NAME = os.getenv("APP_NAME", "utility-splitter")

# Money
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "¥")
MONEY_DECIMALS = int(os.getenv("MONEY_DECIMALS", "2"))

# History storage: "json", "duckdb" or "api"
HISTORY_BACKEND = os.getenv("HISTORY_BACKEND", "json")
HISTORY_PATH = os.getenv("HISTORY_PATH", "data/history")
DATABASE_PATH = os.getenv("DATABASE_PATH", "data/history.duckdb")
HISTORY_API_URL = os.getenv("HISTORY_API_URL", "http://localhost:5000/api")
HISTORY_API_TIMEOUT = float(os.getenv("HISTORY_API_TIMEOUT", "10"))

# Collection names (match the remote API routes)
WATER_COLLECTION = "water"
ELECTRICITY_COLLECTION = "electricity"
COLLECTIONS = (WATER_COLLECTION, ELECTRICITY_COLLECTION)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # text or json

# Date Format
DATE_FORMAT = "%Y-%m-%d"

# Default room naming in form input ("Room A", "Room B", ...)
DEFAULT_ROOM_PREFIX = "Room"
