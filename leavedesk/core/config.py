import os
import logging
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class LeaveSettings(BaseModel):
    # How a negative available balance is reported to clients.
    # "signed" shows the raw value, "clamped" shows 0 plus an overdue figure.
    negative_balance_display: Literal["signed", "clamped"] = Field(
        default=os.getenv("NEGATIVE_BALANCE_DISPLAY", "clamped")
    )
    allow_backdated_requests: bool = Field(default=_env_flag("ALLOW_BACKDATED_REQUESTS"))
    leave_types: Dict[str, str] = {
        "annual": "Annual Leave",
        "sick": "Sick Leave",
        "personal": "Personal Leave",
        "emergency": "Emergency Leave",
        "maternity": "Maternity Leave",
        "paternity": "Paternity Leave",
        "study": "Study Leave",
        "unpaid": "Unpaid Leave",
    }
    default_opening_balance: float = float(os.getenv("DEFAULT_OPENING_BALANCE", "0"))


class Config(BaseModel):
    app_name: str = "LeaveDesk"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./leavedesk.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    refresh_token_expire_days: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # First admin account, created at startup when no admin exists
    bootstrap_admin_email: Optional[str] = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: Optional[str] = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS, comma-separated origins
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:5173,http://127.0.0.1:5173,"
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    rate_limit_enabled: bool = _env_flag("RATE_LIMIT_ENABLED", "true")
    login_rate_limit: str = os.getenv("LOGIN_RATE_LIMIT", "10/minute")

    leave: LeaveSettings = LeaveSettings()

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("Using insecure default SECRET_KEY, only acceptable in development.")
