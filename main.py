import sys
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from tsbapp import config
from tsbapp.infrastructure.db.session import Base, engine
from tsbapp.infrastructure.db.models.question_model import QuestionModel  # noqa: F401
from tsbapp.presentation.api.routers.auth_router import router as auth_router
from tsbapp.presentation.api.routers.question_router import router as question_router
from tsbapp.presentation.api.routers.csv_router import router as csv_router
from tsbapp.presentation.api.routers.document_router import router as document_router, GENERATED_URL

# Create tables
Base.metadata.create_all(bind=engine)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Tournament Question Bank API")

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "detail": "An internal server error occurred."}
    )

# Include routers
app.include_router(auth_router)
app.include_router(question_router)
app.include_router(csv_router)
app.include_router(document_router)

# Generated .tex / .pdf files, served by round code
config.GENERATED_DIR.mkdir(parents=True, exist_ok=True)
app.mount(GENERATED_URL, StaticFiles(directory=str(config.GENERATED_DIR)), name="generated")


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
