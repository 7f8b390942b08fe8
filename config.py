import os

# ------------------------------------------------------------
# Configuration
# Everything comes from the environment; defaults are for local development.
# ------------------------------------------------------------

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_USER = os.getenv("DB_USER", "root")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "naimarket_db")
DB_PORT = int(os.getenv("DB_PORT", 3306))

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+mysqlconnector://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", 10))  # handshake only

PORT = int(os.getenv("PORT", 5000))

PAYSTACK_SECRET = os.getenv("PAYSTACK_SECRET", "")
PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")
PAYSTACK_CURRENCY = os.getenv("PAYSTACK_CURRENCY", "KES")
PAYSTACK_CALLBACK_URL = os.getenv("PAYSTACK_CALLBACK_URL", "https://yourdomain.com/payment-success")
PAYSTACK_TIMEOUT = float(os.getenv("PAYSTACK_TIMEOUT", 30))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 2 * 1024 * 1024))  # 2MB

FILE_TOKEN_SECRET = os.getenv("FILE_TOKEN_SECRET", "naimarket-dev-file-secret-change-me-in-production")
FILE_TOKEN_ALGORITHM = "HS256"
FILE_TOKEN_TTL_SECONDS = int(os.getenv("FILE_TOKEN_TTL_SECONDS", 3600))

# werkzeug method string, e.g. "scrypt" or "pbkdf2:sha256:600000"
PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
