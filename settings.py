import os

from dotenv import load_dotenv


def load_settings():
    """Read .env and the process environment into a dict for app.config"""
    load_dotenv()

    return {
        "APP_ENV": os.getenv("APP_ENV", "development"),
        "SECRET_KEY": os.getenv("SECRET_KEY", "patternlabs-dev-session"),
        "APP_URL": (os.getenv("APP_URL") or os.getenv("NEXT_PUBLIC_APP_URL") or "http://localhost:5000").rstrip("/"),
        "OPENAI_API_KEY": os.getenv("OPENAI_API_KEY", ""),
        "ANALYZE_BACKEND": os.getenv("ANALYZE_BACKEND", "fixture").lower(),
        "ANALYZE_MODEL": os.getenv("ANALYZE_MODEL", "gpt-4o-mini"),
        "CHAT_MODEL": os.getenv("CHAT_MODEL", "gpt-4.1-mini"),
        "STRIPE_SECRET_KEY": os.getenv("STRIPE_SECRET_KEY", ""),
        "STRIPE_PRICE_SINGLE": os.getenv("STRIPE_PRICE_SINGLE", ""),
        "STRIPE_PRICE_SUBSCRIPTION": os.getenv("STRIPE_PRICE_SUBSCRIPTION", ""),
        "STORE_BACKEND": os.getenv("STORE_BACKEND", "memory").lower(),
        "FIREBASE_CREDENTIALS": os.getenv("FIREBASE_CREDENTIALS", "firebase_key.json"),
        "ALLOWED_ORIGINS": [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()],
    }


def dev_tools_enabled(config):
    return config.get("APP_ENV") != "production"
