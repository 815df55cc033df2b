"""
Runtime Environment Validation Module

Validates required environment variables at application startup.
If validation fails, the application refuses to start (hard fail).
"""

import os
import sys

from pydantic import ValidationError

from housedirect.core.config import Settings

ALLOWED_DATABASE_SCHEMES = ("postgresql", "postgresql+asyncpg")
DEBUG_ONLY_DATABASE_SCHEMES = ("sqlite+aiosqlite",)


def _fail(message: str, hint: str = "") -> None:
    print(f"❌ FATAL: {message}", file=sys.stderr)
    if hint:
        print(f"   {hint}", file=sys.stderr)
    sys.exit(1)


def validate_environment() -> Settings:
    """
    Validate all required environment variables at startup.

    Must be called before the FastAPI app starts.

    Returns:
        Settings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = Settings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("\nThe application cannot start with invalid configuration.", file=sys.stderr)
        sys.exit(1)

    # 1. CORS: no wildcard outside debug mode
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            _fail(
                "Wildcard CORS origin (*) detected in production mode.",
                "Set ALLOWED_ORIGINS to specific domains (comma-separated).",
            )

    # 2. Database URL scheme
    scheme = settings.database_url.split("://", 1)[0]
    allowed = ALLOWED_DATABASE_SCHEMES
    if settings.debug:
        allowed = allowed + DEBUG_ONLY_DATABASE_SCHEMES
    if scheme not in allowed:
        _fail(
            f"DATABASE_URL scheme '{scheme}' is not supported.",
            f"Use one of: {', '.join(allowed)}",
        )

    # 3. Firebase: credentials path must exist when provided
    if settings.google_application_credentials:
        if not os.path.exists(settings.google_application_credentials):
            _fail(f"Firebase credentials file not found: {settings.google_application_credentials}")

    # 4. SMTP port range
    if not 0 < settings.smtp_port < 65536:
        _fail(f"SMTP_PORT {settings.smtp_port} is out of range.")

    # 5. Cron endpoints must be protected outside debug mode
    if not settings.debug and not settings.cron_secret:
        _fail(
            "CRON_SECRET is required in production mode.",
            "Scheduled endpoints are rejected without it.",
        )

    if not settings.smtp_configured:
        print("⚠️  SMTP_USER / SMTP_PASSWORD not set; notification emails will not be delivered.")

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Debug: {settings.debug}")
    print(f"   CORS Origins: {settings.allowed_origins}")

    return settings


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
