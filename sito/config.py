import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sito.db")

# Hosted auth provider (Supabase) - access tokens are HS256 JWTs signed with the project secret
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

# Public site URL used for links in notification emails
SITE_URL = os.getenv("SITE_URL", "http://localhost:3000")

# Comma separated list of allowed browser origins
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", SITE_URL).split(",") if origin.strip()
]

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Sito <onboarding@resend.dev>")

# Mail dispatch endpoint receiving best-effort notifications (e.g. https://api.sito.app/notify)
# Unset disables outbound notifications entirely.
MAIL_DISPATCH_URL = os.getenv("MAIL_DISPATCH_URL")
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))
# Shared key the outbox presents to the dispatch endpoint (X-Dispatch-Key). Unset accepts any caller.
MAIL_DISPATCH_KEY = os.getenv("MAIL_DISPATCH_KEY")
