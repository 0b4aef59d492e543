import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ducktype.services.openai_compatible_client import GenerationUnavailableError
from ducktype.subapps.conversation_routes import router as conversations_router
from ducktype.subapps.gemini_routes import router as gemini_router
from ducktype.subapps.message_routes import router as messages_router
from ducktype.subapps.ui_routes import router as ui_router


_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_ROOT / ".env", override=False)

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


_configure_logging()

app = FastAPI(title="DuckType")
app.include_router(ui_router)
app.include_router(conversations_router)
app.include_router(messages_router)
app.include_router(gemini_router)


# Every error body is {"error": "<message>"}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("request.invalid: path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(GenerationUnavailableError)
async def generation_unavailable_handler(request: Request, exc: GenerationUnavailableError):
    logger.error("generation.unavailable: path=%s err=%s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"error": str(exc)})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("request.error: path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "server error"})
