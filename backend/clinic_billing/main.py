from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_billing.core.config import settings
from clinic_billing.routers import credits, payment_methods, settlements

OPENAPI_TAGS = [
    {"name": "Invoices", "description": "Settle invoices and review their payments."},
    {"name": "Credits", "description": "Credit balances available to payers."},
    {"name": "Payment Methods", "description": "Tenders accepted at the cash desk."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Clinic back-office billing API: multi-currency invoice settlement "
        "combining credit balances with a manual payment."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(settlements.router, prefix="/v1/invoices", tags=["Invoices"])
app.include_router(credits.router, prefix="/v1/credits", tags=["Credits"])
app.include_router(
    payment_methods.router,
    prefix="/v1/payment_methods",
    tags=["Payment Methods"],
)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
