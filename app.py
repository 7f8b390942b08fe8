import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

import config
import uploads
from database import init_db
from errors import register_error_handlers
from routes import auth, orders, payments, services, users, vendors

# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # creates the tables if they don't already exist
    uploads.upload_dir()
    logger.info("NaiMarket API ready, uploads in %s", config.UPLOAD_DIR)
    yield


app = FastAPI(title="NaiMarket API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(vendors.router)
app.include_router(services.router)
app.include_router(services.secure_router)
app.include_router(orders.router)
app.include_router(payments.router)

# Uploaded images, served as-is
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/", response_class=PlainTextResponse)
def home():
    return "NaiMarket API is running!"


# ------------------------------------------------------------
# Run the API
# ------------------------------------------------------------

if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
