# coachhub/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from coachhub.errors import ServiceError, service_error_handler
from coachhub.routers.auth import router as auth_router
from coachhub.routers.users import router as users_router
from coachhub.routers.clients import router as clients_router
from coachhub.routers.exercises import router as exercises_router
from coachhub.routers.equipment import router as equipment_router
from coachhub.routers.programs import router as programs_router, library_router
from coachhub.routers.client_programs import router as client_programs_router
from coachhub.routers.client_program_items import router as client_program_items_router
from coachhub.routers.client_exercise_notes import router as client_exercise_notes_router
from coachhub.routers.schedules import router as schedules_router
from coachhub.routers.sessions import router as sessions_router, kudos_router
from coachhub.routers.notifications import router as notifications_router
from coachhub.routers.events import router as events_router
from coachhub.routers.community import communities_router, posts_router
from coachhub.routers.media import router as media_router
from coachhub.db import SessionLocal  # for healthz DB check
from coachhub.settings import get_settings

log = logging.getLogger("uvicorn")
settings = get_settings()

app = FastAPI(
    title="CoachHub API",
    openapi_tags=[
        {"name": "auth", "description": "Registration & login"},
        {"name": "users", "description": "User administration"},
        {"name": "clients", "description": "An instructor's clients"},
        {"name": "exercises", "description": "Exercise catalog"},
        {"name": "equipment", "description": "Equipment catalog"},
        {"name": "programs", "description": "Program templates"},
        {"name": "library", "description": "Public program library"},
        {"name": "client-programs", "description": "Programs assigned to clients"},
        {"name": "customizations", "description": "Per-client exercise overrides and notes"},
        {"name": "schedule", "description": "Calendar of planned workouts"},
        {"name": "sessions", "description": "Training sessions"},
        {"name": "kudos", "description": "Instructor reactions to sessions"},
        {"name": "notifications", "description": "In-app notifications and nudges"},
        {"name": "events", "description": "Events, registration & waitlists"},
        {"name": "community", "description": "Communities, posts, comments & likes"},
        {"name": "media", "description": "Media library metadata"},
    ],
)

# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ServiceError, service_error_handler)

@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.get("/")
def root():
    return {"ok": True, "name": "CoachHub API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(users_router)
app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(exercises_router)
app.include_router(equipment_router)
app.include_router(programs_router)
app.include_router(library_router)
app.include_router(client_programs_router)
app.include_router(client_program_items_router)
app.include_router(client_exercise_notes_router)
app.include_router(schedules_router)
app.include_router(sessions_router)
app.include_router(kudos_router)
app.include_router(notifications_router)
app.include_router(events_router)
app.include_router(communities_router)
app.include_router(posts_router)
app.include_router(media_router)
