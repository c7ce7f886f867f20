from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router as api_router
from .healthcheck import router as health_router
from .settings import CORS_ORIGINS

app = FastAPI(title="RisqMap - Metrics API", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(api_router)

@app.get("/")
def root():
    return {"status": "risqmap backend running"}
