import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

import config
from utils.config_validator import validate_or_exit
from utils.logging_config import setup_logging

# Initialize centralized logging configuration
setup_logging()
validate_or_exit(config)

from db import create_db_and_tables
from processing.payment_return import payment_return_router, get_order_pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    await create_db_and_tables()
    logging.info(f"[Startup] Local store ready, remote API at {config.ORDER_API_URL}")

    pending = await get_order_pipeline().list_pending()
    if pending:
        logging.warning(f"[Startup] {len(pending)} orders are waiting to be re-sent to the backend")

    yield

    await get_order_pipeline().order_api.close()
    logging.warning('Bye!')


app = FastAPI(lifespan=lifespan)
app.include_router(payment_return_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


def main() -> None:
    uvicorn.run(app, host=config.WEBAPP_HOST, port=config.WEBAPP_PORT)


if __name__ == '__main__':
    main()
