"""
Entry point untuk Site Search API
"""
import uvicorn

from sitesearch.api.app import create_app
from sitesearch.core.config import Settings
from sitesearch.core.logger import Logger

settings = Settings.from_env()
Logger.setup_logging(settings.log_level, settings.log_file)

# Create FastAPI app instance
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload
    )
