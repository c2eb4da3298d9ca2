"""
Portfolio Chat Gateway - FastAPI application backing the portfolio assistant.
Forwards conversations to hosted LLM providers with persona priming, language detection and ordered fallback.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import chat
from services.chat_service import ChatGateway
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager: refuse to start on bad configuration."""
    Config.validate()
    app.state.gateway = ChatGateway.from_config()
    app_logger.info(f"{Config.APP_TITLE} ready (strategy={Config.CHAT_STRATEGY}, language_detection={Config.LANGUAGE_DETECTION})")
    yield
    await HTTPClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "Portfolio Chat Gateway is running"}

app.include_router(chat.router, tags=["chat"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
