import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings

from auth.routes.auth_router import auth_router
from shift.router import shift_router
from application.router import application_router
from cancellation.router import cancellation_router
from timesheet.router import timesheet_router
from finance.router import finance_router
from review.router import review_router
from worker_relation.router import worker_relation_router
from account.router import account_router
from manager.router import manager_router
from shift_template.router import shift_template_router
import models_bootstrap

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

openapi_tags = [
    {
        "name": "Applications",
        "description": "Applying to shifts and deciding on candidates",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title="Shiftmarket API", openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(auth_router, prefix="/api")
app.include_router(shift_router, prefix="/api")
app.include_router(application_router, prefix="/api")
app.include_router(cancellation_router, prefix="/api")
app.include_router(timesheet_router, prefix="/api")
app.include_router(finance_router, prefix="/api")
app.include_router(review_router, prefix="/api")
app.include_router(worker_relation_router, prefix="/api")
app.include_router(account_router, prefix="/api")
app.include_router(manager_router, prefix="/api")
app.include_router(shift_template_router, prefix="/api")



@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
