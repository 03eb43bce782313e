"""Configuration management for the Sinko site-synthesis backend."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Generation Configuration
GENERATION_MODEL = os.getenv("GENERATION_MODEL", "llama-3.3-70b-versatile")
GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))
GENERATION_MAX_TOKENS = int(os.getenv("GENERATION_MAX_TOKENS", "8000"))

# Identity Store Configuration
IDENTITY_BACKEND = os.getenv("IDENTITY_BACKEND", "file")  # file, memory or supabase
IDENTITY_STORE_PATH = os.getenv("IDENTITY_STORE_PATH", ".sinko/identity.json")
IDENTITY_TABLE = os.getenv("IDENTITY_TABLE", "kv_store")

# Render / Export Configuration
EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "sinko_design.html")
DEPLOY_DELAY_SECONDS = float(os.getenv("DEPLOY_DELAY_SECONDS", "2.0"))

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
