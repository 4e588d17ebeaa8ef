# app/main.py
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from app.routers import exam, question_bank
from app.db.mongo import client, ensure_indexes, verify_mongodb_connection
from app.core.config import settings
from app.core.logger import logger
from app.utils.errors import BoundaryValidationError, InsufficientQuestionsError
from app.utils.responses import format_error_response


app = FastAPI(
    title="Exam Manager",
    version="0.1.0",
    description="Question banks, exam composition and role-scoped exam views",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup/shutdown
@app.on_event("startup")
async def startup():
    await verify_mongodb_connection()
    await ensure_indexes()

@app.on_event("shutdown")
async def shutdown_db():
    client.close()

# Health check
@app.get("/", tags=["root"], summary="Health check")
async def root():
    return {"status": "ok", "service": "Exam Manager"}

# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc, status_code=exc.status_code),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=format_error_response(exc, status_code=422),
    )

@app.exception_handler(BoundaryValidationError)
async def boundary_exception_handler(request: Request, exc: BoundaryValidationError):
    return JSONResponse(
        status_code=400,
        content=format_error_response(exc, status_code=400, specialties=exc.specialties),
    )

@app.exception_handler(InsufficientQuestionsError)
async def insufficient_questions_handler(request: Request, exc: InsufficientQuestionsError):
    return JSONResponse(
        status_code=400,
        content=format_error_response(
            exc,
            status_code=400,
            themeId=exc.theme_id,
            pointValue=exc.point_value,
            requested=exc.requested,
            available=exc.available,
        ),
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=format_error_response(exc),
    )

# Routes
app.include_router(exam.router,          prefix="/exams")
app.include_router(question_bank.router)
