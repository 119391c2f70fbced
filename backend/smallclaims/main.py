import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import graphs, scoring
from .config import settings
from .errors import GraphStorageError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Small Claims Readiness API")

app.include_router(scoring.router)
app.include_router(graphs.router)


@app.exception_handler(GraphStorageError)
async def graph_storage_error_handler(request: Request, exc: GraphStorageError):
    return JSONResponse(status_code=503, content={"detail": exc.to_dict()})


@app.get("/health")
async def health():
    return {"status": "ok"}
