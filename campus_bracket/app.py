from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response

from campus_bracket.config import config, environment
from campus_bracket.database import database
from campus_bracket.routes import join_requests, matches, teams, tournaments
from campus_bracket.utils.alembic import alembic_run_migrations
from campus_bracket.utils.errors import ErrorKind, TournamentEngineError
from campus_bracket.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if config.auto_run_migrations:
        alembic_run_migrations()

    await database.connect()
    logger.info("Connected to database, environment: %s", environment.value)
    yield
    await database.disconnect()


app = FastAPI(title="Campus Bracket API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TournamentEngineError)
async def tournament_engine_error_handler(
    request: Request, exc: TournamentEngineError
) -> Response:
    if exc.kind is ErrorKind.INTEGRITY:
        logger.critical(
            "Bracket integrity alert on %s %s: %s", request.method, request.url.path, exc.detail
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected invalid request on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed.", "errors": jsonable_encoder(exc.errors())},
    )


for router in (tournaments.router, matches.router, join_requests.router, teams.router):
    app.include_router(router)
