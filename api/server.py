"""
FastAPI server exposing the database as a REST API and a small HTML console.
"""

import os
import threading
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from relstore.config import get_settings
from relstore.engine import DatabaseEngine
from relstore.errors import StorageError
from relstore.logging import get_logger, setup_logging

logger = get_logger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)


class QueryRequest(BaseModel):
    query: str


_engine: Optional[DatabaseEngine] = None
_engine_lock = threading.Lock()


def get_engine() -> DatabaseEngine:
    """Engine shared by every request, built once from the global settings."""
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine = DatabaseEngine()
        return _engine


def run_query(engine: DatabaseEngine, query: str) -> Dict[str, Any]:
    """Execute a query and translate engine errors into HTTP errors."""
    try:
        return engine.execute(query).to_dict()
    except StorageError as e:
        logger.error("storage_failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))
    except (SyntaxError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


def create_app() -> FastAPI:
    app = FastAPI(title="relstore API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=HTMLResponse)
    def console(request: Request, engine: DatabaseEngine = Depends(get_engine)):
        """Query console page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {"query": "", "result": None, "error": None, "tables": engine.list_tables()},
        )

    @app.post("/", response_class=HTMLResponse)
    def console_submit(
        request: Request,
        query: str = Form(...),
        engine: DatabaseEngine = Depends(get_engine),
    ):
        """Run a query from the console form and render the outcome."""
        result = None
        error = None
        status_code = 200
        try:
            result = run_query(engine, query)
        except HTTPException as e:
            error = e.detail
            status_code = e.status_code

        return templates.TemplateResponse(
            request,
            "index.html",
            {"query": query, "result": result, "error": error, "tables": engine.list_tables()},
            status_code=status_code,
        )

    @app.post("/query")
    def execute_query(body: QueryRequest, engine: DatabaseEngine = Depends(get_engine)):
        """Execute a raw SQL-like query."""
        return run_query(engine, body.query)

    @app.get("/tables")
    def list_tables(engine: DatabaseEngine = Depends(get_engine)):
        """List all tables in the database."""
        return {"tables": engine.list_tables()}

    @app.get("/tables/{table_name}")
    def get_table_info(table_name: str, engine: DatabaseEngine = Depends(get_engine)):
        """Get information about a specific table."""
        try:
            return engine.get_table_info(table_name)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

    return app


app = create_app()


def main():
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("server_starting", host=settings.host, port=settings.port,
                data_file=str(settings.data_file))
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
