import os
from dotenv import load_dotenv

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "backoffice")

PROJECTS_COLLECTION = os.getenv("PROJECTS_COLLECTION", "projects")
INVESTMENTS_COLLECTION = os.getenv("INVESTMENTS_COLLECTION", "investments")
EXPENSES_COLLECTION = os.getenv("EXPENSES_COLLECTION", "expenses")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")

QUERY_TIMEOUT_MS = int(os.getenv("QUERY_TIMEOUT_MS", "5000"))

# ---- Optional AI enrichment ----
# "huggingface", "gemini" or "none"
ENRICHMENT_PROVIDER = os.getenv("ENRICHMENT_PROVIDER", "huggingface")
ENRICHMENT_TIMEOUT_S = float(os.getenv("ENRICHMENT_TIMEOUT_S", "10"))
# worker threads for enrichment calls; abandoned (timed-out) calls hold one until they return
ENRICHMENT_WORKERS = int(os.getenv("ENRICHMENT_WORKERS", "8"))

HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY", "")
HUGGINGFACE_MODEL_URL = os.getenv(
    "HUGGINGFACE_MODEL_URL",
    "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium",
)

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
