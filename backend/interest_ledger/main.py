from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interest_ledger.core.config import settings
from interest_ledger.api.routes.accrual import router as accrual_router

app = FastAPI()

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(accrual_router)
