"""
Process configuration, read from the environment (and `.env`, loaded by main).

  PORT=3000
  SESSION_TTL_SECONDS=3600      sessions older than this are swept
  SWEEP_INTERVAL_SECONDS=600    how often the sweeper runs
  CORS_ORIGINS=*                comma-separated list
  LOG_LEVEL=INFO
"""

import os
from datetime import timedelta

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3000"))

SESSION_TTL = timedelta(seconds=int(os.environ.get("SESSION_TTL_SECONDS", "3600")))
SWEEP_INTERVAL_SECONDS = float(os.environ.get("SWEEP_INTERVAL_SECONDS", "600"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
