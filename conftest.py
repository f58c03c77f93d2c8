"""Global pytest configuration."""

import os

# Tests run without external services unless explicitly configured
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("OPENAI_API_KEY", "")
