from __future__ import annotations

import os

# Settings() is built at import time; required keys must exist before any src.app import
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("BING_IMAGE_SEARCH_API_KEY", "test-bing-key")
