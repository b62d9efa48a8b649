"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import calculator, payments, properties
from src.config import settings

app = FastAPI(
    title="Coop Payments",
    description="Mortgage calculators and property payment tracking for housing cooperatives",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculator.router)
app.include_router(payments.router)
app.include_router(properties.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the API with uvicorn; logging is configured here, not on import."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
