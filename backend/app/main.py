from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.startup import configure_logging, run_startup_checks
from core.config import get_settings
from core.exceptions import register_exception_handlers

# ========== Staff & Attendance ==========
from modules.staff.routes.attendance_routes import router as attendance_router

# ========== Payroll Management ==========
from modules.payroll.exceptions import register_payroll_exception_handlers
from modules.payroll.routes.payroll_routes import router as payroll_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title="HRMS Payroll API",
    description="""
    Monthly payroll for the HRMS platform.

    ## Features

    * **Salary Calculation** - Attendance-based loss of pay, benefits and deductions
    * **Slip Generation** - Idempotent bulk generation with a month-end cutoff
    * **Slip Management** - Listing, payment marking, history and statistics

    ## Authentication

    Authentication happens upstream. The gateway forwards the caller as
    `X-Actor-Id` and `X-Actor-Roles` headers.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)
register_payroll_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========== Include routers ==========
app.include_router(attendance_router)
app.include_router(payroll_router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration and database on application startup"""
    run_startup_checks()


@app.get("/")
def read_root():
    return {"message": "HRMS payroll backend is running"}
