import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import AsyncSessionLocal, init_db
from api.analytics import router as analytics_router
from api.cases import router as cases_router
from api.configuration import banks_router, officers_router, router as configuration_router
from api.documents import router as documents_router
from api.suggestions import router as suggestions_router
from services.case_store import CaseStore
from services.document_storage import S3DocumentStorage
from services.errors import CaseStoreError
from services.gateway import CaseGateway

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("loan-cases")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    store = CaseStore(
        CaseGateway(AsyncSessionLocal),
        S3DocumentStorage.from_settings(settings),
        max_total_upload_bytes=settings.max_total_upload_bytes,
    )
    try:
        await store.load()
    except CaseStoreError:
        # Serve anyway; the error is exposed on /api/config and /health.
        logger.exception("[STARTUP] Initial load of loan cases failed")
    app.state.store = store
    yield


app = FastAPI(
    title=settings.app_name,
    description="Loan case tracking: cases, status history, documents, analytics and suggestions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cases_router)
app.include_router(documents_router)
app.include_router(configuration_router)
app.include_router(officers_router)
app.include_router(banks_router)
app.include_router(analytics_router)
app.include_router(suggestions_router)


@app.get("/health")
async def health():
    store = getattr(app.state, "store", None)
    if store is None or store.error:
        return {"status": "degraded", "error": store.error if store else "store not initialized"}
    return {"status": "ok", "cases": len(store.cases)}
