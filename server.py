# server.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kafka_logdirs import __version__
from kafka_logdirs.api import log_dirs as log_dirs_router
from kafka_logdirs.core.config import get_settings
from kafka_logdirs.core.errors import install_exception_handlers

settings = get_settings()

app = FastAPI(
    title="Kafka Log Dirs API",
    version=__version__,
    openapi_url="/api/v1/openapi.json",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
)

# --- CORS: allow a local web-ui during development ---
allow_origins = settings.cors_allow_origins or [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(log_dirs_router.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
