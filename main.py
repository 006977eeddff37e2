import logging
from contextlib import AsyncExitStack

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mongoengine.errors import NotUniqueError, ValidationError
from pymongo.errors import PyMongoError
from redis import RedisError

from app.connections import mongo_lifespan
from app.connections.redis import redis_lifespan
from app.api.deps import close_payment_gateway
from app.api.answer import router as answer_router
from app.api.candidate import router as candidate_router
from app.api.concern import router as concern_router
from app.api.exam import router as exam_router
from app.api.material import router as material_router
from app.api.notification import router as notification_router
from app.api.payment import router as payment_router
from app.api.result import router as result_router
from app.api.winner import router as winner_router
from app.utils.base import AppError, Conflict, InvalidFormat, UpstreamFailure
from app.utils.config import settings


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def combined_lifespan(app: FastAPI):
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(mongo_lifespan(app))
        await stack.enter_async_context(redis_lifespan(app))
        stack.callback(close_payment_gateway)

        yield


app = FastAPI(title="Exam Administration", version="0.1.0", lifespan=combined_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return await app_error_handler(request, InvalidFormat("Invalid request format", details=details))


@app.exception_handler(ValidationError)
async def document_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return await app_error_handler(request, InvalidFormat("Invalid document", details=str(exc)))


@app.exception_handler(NotUniqueError)
async def not_unique_handler(request: Request, exc: NotUniqueError) -> JSONResponse:
    return await app_error_handler(request, Conflict("Record already exists", details=str(exc)))


@app.exception_handler(PyMongoError)
@app.exception_handler(RedisError)
async def upstream_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Backing store failure on %s %s: %s", request.method, request.url.path, exc)
    return await app_error_handler(request, UpstreamFailure("Backing store request failed", details=str(exc)))


app.include_router(answer_router, prefix="/api")
app.include_router(result_router, prefix="/api")
app.include_router(exam_router, prefix="/api")
app.include_router(candidate_router, prefix="/api")
app.include_router(notification_router, prefix="/api")
app.include_router(material_router, prefix="/api")
app.include_router(concern_router, prefix="/api")
app.include_router(winner_router, prefix="/api")
app.include_router(payment_router, prefix="/api")
