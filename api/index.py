"""Vercel serverless entry point wrapping the FastAPI app via Mangum."""

from mangum import Mangum
from loanbook.api.main import app

handler = Mangum(app, lifespan="off")
