# FastAPI Application Entry
# Builds the app from environment settings so uvicorn can find it from the project root

from app.main import create_app

app = create_app()

# Run: uvicorn main:app --host 0.0.0.0 --port 8001
