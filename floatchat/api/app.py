"""
FastAPI endpoints for FloatChat.

Provides the REST API used by the dashboard: chat queries and history,
NetCDF file processing and status, embedding search and data statistics.
"""

from datetime import datetime
from typing import Optional
import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import Config
from ..database.connection import DatabaseManager, get_db_manager
from ..database.gateway import OceanDataGateway
from ..ingestion.netcdf_processor import NetCDFProcessor
from ..rag.chat_processor import ChatProcessor
from ..rag.vector_store import VectorEmbeddingsGenerator

logger = logging.getLogger(__name__)

app = FastAPI(
    title=Config.API_TITLE,
    version=Config.API_VERSION,
    description="Keyword chat and synthetic data processing for ARGO oceanographic float data"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


# Pydantic models for API requests

class ChatRequest(BaseModel):
    query: Optional[str] = Field(None, description="Natural language question about oceanographic data")
    session_id: Optional[str] = Field(None, alias="sessionId", description="Chat session identifier")


class ProcessNetCDFRequest(BaseModel):
    filename: Optional[str] = Field(None, description="NetCDF filename, e.g. R5906468_245.nc")
    file_path: Optional[str] = Field(None, alias="filePath", description="Location of the file")


# Dependencies

def get_database() -> DatabaseManager:
    return get_db_manager()


def get_gateway(db: DatabaseManager = Depends(get_database)) -> OceanDataGateway:
    return OceanDataGateway(db)


def get_chat_processor(gateway: OceanDataGateway = Depends(get_gateway)) -> ChatProcessor:
    return ChatProcessor(gateway)


def get_netcdf_processor(gateway: OceanDataGateway = Depends(get_gateway)) -> NetCDFProcessor:
    return NetCDFProcessor(gateway)


def get_embeddings(gateway: OceanDataGateway = Depends(get_gateway)) -> VectorEmbeddingsGenerator:
    return VectorEmbeddingsGenerator(gateway)


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return error_response(400, "Invalid request", str(exc.errors()))


@app.get("/health")
def health_check(db: DatabaseManager = Depends(get_database)):
    """Health check endpoint"""
    database_ok = db.test_connection()
    return {
        "status": "healthy" if database_ok else "unhealthy",
        "timestamp": datetime.utcnow().isoformat(),
        "services": {"database": "healthy" if database_ok else "unhealthy"}
    }


@app.post("/api/chat")
def chat(request: ChatRequest, processor: ChatProcessor = Depends(get_chat_processor)):
    """Process a natural language query about oceanographic data"""
    if not request.query or not request.session_id:
        return error_response(400, "Query and session ID are required")

    logger.info(f"Processing chat query: {request.query}")

    try:
        result = processor.process_query(request.query, request.session_id)
    except Exception as e:
        logger.error(f"Error processing chat query: {e}")
        return error_response(500, "Failed to process chat query", str(e) or "Unknown error")

    return {
        "success": True,
        "response": result.response,
        "queryType": result.query_type,
        "executionTime": result.execution_time,
        "dataUsed": len(result.data_used),
        "visualizations": result.visualizations,
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/chat")
def chat_history(session_id: Optional[str] = Query(None, alias="sessionId"),
                 processor: ChatProcessor = Depends(get_chat_processor)):
    """Retrieve the chat history of a session"""
    if not session_id:
        return error_response(400, "Session ID parameter is required")

    try:
        history = processor.get_chat_history(session_id)
    except Exception as e:
        logger.error(f"Error fetching chat history: {e}")
        return error_response(500, "Failed to fetch chat history", str(e) or "Unknown error")

    return {
        "success": True,
        "messages": history,
        "count": len(history),
    }


@app.post("/api/process-netcdf")
def process_netcdf(request: ProcessNetCDFRequest,
                   processor: NetCDFProcessor = Depends(get_netcdf_processor)):
    """Process a NetCDF file and store its profile"""
    if not request.filename or not request.file_path:
        return error_response(400, "Filename and file path are required")

    logger.info(f"Processing NetCDF file: {request.filename}")

    try:
        processor.process_and_store(request.filename, request.file_path)
    except Exception as e:
        logger.error(f"Error processing NetCDF file: {e}")
        return error_response(500, "Failed to process NetCDF file", str(e) or "Unknown error")

    return {
        "success": True,
        "message": f"Successfully processed {request.filename}",
        "filename": request.filename,
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/api/process-netcdf")
def netcdf_status(filename: Optional[str] = None,
                  gateway: OceanDataGateway = Depends(get_gateway)):
    """Check the processing status of a NetCDF file"""
    if not filename:
        return error_response(400, "Filename parameter is required")

    try:
        record = gateway.get_file(filename)
    except Exception as e:
        logger.error(f"Error checking file status: {e}")
        return error_response(500, "Failed to check file status", str(e) or "Unknown error")

    if record is None:
        return error_response(404, "File not found")

    return {
        "filename": record["filename"],
        "status": record["processing_status"],
        "processedAt": record["processed_at"],
        "errorMessage": record["error_message"],
        "fileSize": record["file_size_bytes"],
    }


@app.get("/api/embeddings/search")
def search_embeddings(query: str = "", limit: int = Query(Config.DEFAULT_SEARCH_LIMIT, ge=1, le=100),
                      embeddings: VectorEmbeddingsGenerator = Depends(get_embeddings)):
    """Return stored content for a query (most recent first)"""
    try:
        results = embeddings.search_similar_content(query, limit)
    except Exception as e:
        logger.error(f"Error searching embeddings: {e}")
        return error_response(500, "Failed to search embeddings", str(e) or "Unknown error")

    return {"success": True, "results": results, "count": len(results)}


@app.get("/api/stats")
def statistics(gateway: OceanDataGateway = Depends(get_gateway)):
    """Counts of floats, profiles, measurements, embeddings and chat queries"""
    try:
        return {"success": True, "stats": gateway.get_statistics()}
    except Exception as e:
        logger.error(f"Error computing statistics: {e}")
        return error_response(500, "Failed to compute statistics", str(e) or "Unknown error")


@app.on_event("startup")
def startup_event():
    """Create tables on startup"""
    logger.info("Starting FloatChat API")
    try:
        get_db_manager().create_tables()
    except Exception as e:
        logger.error(f"Startup database initialization failed: {e}")


def main():
    import uvicorn

    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)


if __name__ == "__main__":
    main()
