import os
from dotenv import load_dotenv

load_dotenv()

# --- Players ---
PLAYER1_NAME = os.getenv("PLAYER1_NAME", "Nish")
PLAYER2_NAME = os.getenv("PLAYER2_NAME", "Jess")

# --- Scoring / reset policy ---
RESET_PERIOD_HOURS = float(os.getenv("RESET_PERIOD_HOURS", "24"))
HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "7"))
WATER_ML_PER_POINT = float(os.getenv("WATER_ML_PER_POINT", "750"))  # older builds used 500

# --- Database ---
# Default to local SQLite, but prefer environment variable (for hosted Postgres)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/competitive_track.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Server ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
