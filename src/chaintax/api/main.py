import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from chaintax import __version__
from chaintax.api.portfolio import router as portfolio_router
from chaintax.api.tax import router as tax_router
from chaintax.container import Container

logger = logging.getLogger("chaintax.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    logging.basicConfig(
        level=container.settings().log_level,
        format="%(asctime)s %(levelname)-5s %(name)s - %(message)s",
    )
    app.state.container = container
    yield
    await container.http_client().close()


app = FastAPI(title="chaintax", version=__version__, lifespan=lifespan)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tax_router)
app.include_router(portfolio_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": __version__}
