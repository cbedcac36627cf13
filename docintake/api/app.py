from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from docintake.api.schemas import DeleteResponse, DocumentResponse
from docintake.logging.logger import Log
from docintake.processor.controller import IntakeController
from docintake.processor.exceptions import (
    BlobNotFoundError,
    DocumentNotFoundError,
    InvalidRequest,
    PayloadTooLarge,
    StorageError,
    SubmissionValidationError,
    UnsupportedMediaType,
)

_VALIDATION_STATUS: dict[type[SubmissionValidationError], int] = {
    PayloadTooLarge: 413,
    UnsupportedMediaType: 415,
}


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def create_app(controller: IntakeController) -> FastAPI:
    """HTTP surface for uploads and document management."""
    app = FastAPI(title="docintake")

    @app.exception_handler(SubmissionValidationError)
    async def _validation_error(_request: Request, exc: SubmissionValidationError) -> JSONResponse:
        return _error(_VALIDATION_STATUS.get(type(exc), 400), exc.code, str(exc))

    @app.exception_handler(DocumentNotFoundError)
    async def _not_found(_request: Request, exc: DocumentNotFoundError) -> JSONResponse:
        return _error(404, "not_found", str(exc))

    @app.exception_handler(BlobNotFoundError)
    async def _blob_missing(_request: Request, exc: BlobNotFoundError) -> JSONResponse:
        Log.error(f"Stored bytes missing: {exc}")
        return _error(404, "content_missing", str(exc))

    @app.exception_handler(StorageError)
    async def _storage_error(_request: Request, exc: StorageError) -> JSONResponse:
        Log.error(f"Storage failure: {exc}")
        return _error(500, "storage_error", "Failed to store document")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/documents", response_model=DocumentResponse)
    def upload_document(
        owner_id: str = Form(""),
        document_type: str = Form(""),
        file: UploadFile | None = File(None),
    ) -> DocumentResponse:
        if file is None:
            raise InvalidRequest("file is required")
        document = controller.submit_stream(
            owner_id=owner_id,
            stream=file.file,
            original_name=file.filename or "",
            media_type=file.content_type or "",
            document_type=document_type,
        )
        return DocumentResponse.from_document(document)

    @app.get("/owners/{owner_id}/documents", response_model=list[DocumentResponse])
    def list_documents(owner_id: str) -> list[DocumentResponse]:
        return [DocumentResponse.from_document(d) for d in controller.list_documents(owner_id)]

    @app.get("/documents/{document_id}", response_model=DocumentResponse)
    def get_document(document_id: int) -> DocumentResponse:
        document = controller.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return DocumentResponse.from_document(document)

    @app.get("/documents/{document_id}/content")
    def get_document_content(document_id: int) -> Response:
        document, content = controller.read_content(document_id)
        return Response(content=content, media_type=document.media_type)

    @app.delete("/documents/{document_id}", response_model=DeleteResponse)
    def delete_document(document_id: int) -> DeleteResponse:
        return DeleteResponse(deleted=controller.delete(document_id))

    return app
