"""
Run the PriceLens backend server.
"""
import os

# Load environment before settings are imported
from dotenv import load_dotenv

backend_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(backend_dir, ".env"))

import uvicorn

if __name__ == "__main__":
    from pricelens.core.config import settings

    print("Starting PriceLens Backend Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "pricelens.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
