import logging

import uvicorn
from fastapi import FastAPI

from config import LOG_LEVEL
from routes import svg_extraction

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="SVG Extractor")

app.include_router(svg_extraction.router, prefix="/api")


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Serve the API with uvicorn."""
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
