import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Quiet period before a column layout edit is written; a newer edit restarts it
LAYOUT_SAVE_DELAY_MS = int(os.getenv("LAYOUT_SAVE_DELAY_MS", "500"))

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

CORS_ORIGINS = _cors_origins
