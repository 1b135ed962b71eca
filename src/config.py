"""Configuration module for the learning management backend.

This module provides centralized configuration management, including directory
paths, API server settings, LLM configuration, and code execution limits.
All configuration values can be overridden via environment variables.
"""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (document store, uploads, rendered pages)
DATA_DIR = Path(os.getenv("LMS_DATA_DIR", str(ROOT_DIR / "data"))).resolve()

# Document store file
DB_DIR = DATA_DIR / "db"
DATABASE_PATH = DB_DIR / "database.json"

# Upload storage root, served to clients under UPLOADS_URL_PREFIX
UPLOADS_DIR = DATA_DIR / "uploads"
UPLOADS_URL_PREFIX = "/uploads"

# Rendered lesson pages
PUBLIC_DIR = DATA_DIR / "public"
LESSON_PAGES_DIR = PUBLIC_DIR / "lessons"

# HTML templates directory name
TEMPLATE_DIR_NAME = "templates"
TEMPLATE_DIR = Path(__file__).parent / TEMPLATE_DIR_NAME

# --- Upload Classification ---

HANDOUT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx"})
POWERPOINT_EXTENSIONS = frozenset({".ppt", ".pptx"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".avi", ".mkv"})

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", os.getenv("PORT", "3000")))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,"
    "http://127.0.0.1:5173",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- LLM Configuration ---

# Default provider for the tutoring bots
DEFAULT_LLM_PROVIDER: str = os.getenv("DEFAULT_LLM_PROVIDER", "openai")

# Provider registry for OpenAI-compatible endpoints
LLM_PROVIDERS: Dict[str, Dict[str, Optional[str]]] = {
    "openai": {
        "display_name": "OpenAI",
        "base_url": None,
        "default_model": "gpt-4o-mini",
        "env_key": "OPENAI_API_KEY",
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "env_key": "DEEPSEEK_API_KEY",
    },
    "gemini": {
        "display_name": "Google Gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.5-flash",
        "env_key": "GOOGLE_API_KEY",
    },
}

# Overrides the provider's default model when set
AI_MODEL: Optional[str] = os.getenv("AI_MODEL")
AI_TEMPERATURE: float = float(os.getenv("AI_TEMPERATURE", "0.7"))

# Output token budgets per endpoint
QUIZBOT_MAX_TOKENS: int = int(os.getenv("QUIZBOT_MAX_TOKENS", "600"))
ASK_MAX_TOKENS: int = int(os.getenv("ASK_MAX_TOKENS", "300"))
CHAT_MAX_TOKENS: int = int(os.getenv("CHAT_MAX_TOKENS", "600"))

# Optional plain-text knowledge base embedded in the general chat prompt
AI_KNOWLEDGE_BASE_PATH = Path(
    os.getenv("AI_KNOWLEDGE_BASE_PATH", str(DATA_DIR / "api.knowledge.txt"))
)

# --- Code Execution Configuration ---

# Wall-clock limit per compile or run step, in seconds
CODE_EXECUTION_TIMEOUT: float = float(os.getenv("CODE_EXECUTION_TIMEOUT", "10"))

# CPU-time limit per child process, in seconds (POSIX only)
CODE_CPU_LIMIT_SECONDS: int = int(os.getenv("CODE_CPU_LIMIT_SECONDS", "10"))

# Address-space limit per child process; 0 disables it (POSIX only)
CODE_MEMORY_LIMIT_MB: int = int(os.getenv("CODE_MEMORY_LIMIT_MB", "512"))

# Captured output is cut to this many characters
CODE_MAX_OUTPUT_CHARS: int = int(os.getenv("CODE_MAX_OUTPUT_CHARS", "20000"))

PYTHON_EXECUTABLE: str = os.getenv("PYTHON_EXECUTABLE", sys.executable)
NODE_EXECUTABLE: str = os.getenv("NODE_EXECUTABLE", "node")
JAVAC_EXECUTABLE: str = os.getenv("JAVAC_EXECUTABLE", "javac")
JAVA_EXECUTABLE: str = os.getenv("JAVA_EXECUTABLE", "java")
CXX_EXECUTABLE: str = os.getenv("CXX_EXECUTABLE", "g++")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

# --- Defaults ---

# Used when a course or lesson is created without an uploader
DEFAULT_UPLOADER_ID: str = os.getenv("DEFAULT_UPLOADER_ID", "S1234")
DEFAULT_COURSE_IMAGE: str = "default-course.jpg"
