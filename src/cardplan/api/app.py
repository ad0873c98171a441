import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cardplan.api.routes.health import router as health_router
from cardplan.api.routes.recommend import router as recommend_router
from cardplan.config import configure_logging, settings
from cardplan.repository.card_store import CardStoreError

logger = logging.getLogger(__name__)

app = FastAPI(title="CardPlan API", version="0.1.0")
app.include_router(health_router)
app.include_router(recommend_router)


@app.exception_handler(ValueError)
async def bad_request(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# missing or malformed card data files
@app.exception_handler(CardStoreError)
@app.exception_handler(FileNotFoundError)
async def card_data_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error("card data unavailable for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": f"Card data unavailable: {exc}"})


def run() -> None:
    configure_logging()
    logger.info("serving cards from %s on %s:%s", settings.cards_file, settings.app_host, settings.app_port)
    uvicorn.run("cardplan.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
