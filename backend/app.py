"""
FastAPI application for the Repo Monitor dashboard.

This provides a REST API over the monitor. The browser dashboard
consumes these endpoints and renders the five PR buckets.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routes import router

app = FastAPI(
    title="Repo Monitor API",
    description="Open pull request buckets for a GitHub repository",
    version="1.0.0"
)

# Allow the dashboard dev server (Vite, port 5173) to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
