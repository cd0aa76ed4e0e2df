import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from app.draws.draw_comparator import history_limit_from_env
from app.scoring.crs_policy import get_policy
from routes.eligibility import router as eligibility_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CRS Draw Checker",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json"
)

app.include_router(eligibility_router, prefix="/api/v1")

cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    # Fail fast on a misconfigured CRS_POLICY_EPOCH or DRAW_HISTORY_LIMIT.
    policy = get_policy()
    logger.info(f"CRS policy epoch {policy.epoch} active (signature {policy.signature()})")
    logger.info(f"Draw history limit: {history_limit_from_env()}")

@app.get("/health")
async def health():
    return { "status": "ok"}
