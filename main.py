"""FastAPI app entry point for the Rulz engine."""

import logging

from fastapi import FastAPI

from api.characters import router as characters_router
from api.encounters import router as encounters_router
from api.rules import router as rules_router
from config import LOG_LEVEL, RULES_DIR
from engine.rulebook import load_rulebook

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Rulz Engine",
    description="D&D 3.5 SRD character rules: derived stats, build validation and encounters",
    version="0.1.0",
)

# Reference tables are loaded once and handed to every request
app.state.rules = load_rulebook(RULES_DIR)

app.include_router(rules_router, prefix="/rules", tags=["Rules"])
app.include_router(characters_router, prefix="/characters", tags=["Characters"])
app.include_router(encounters_router, prefix="/encounters", tags=["Encounters"])


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {"name": "Rulz Engine", "version": "0.1.0", "status": "running"}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    rules = app.state.rules
    return {"healthy": True, "races": len(rules.races), "classes": len(rules.classes)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
