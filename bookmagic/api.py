"""
HTTP surface for the BookMagic pipeline (FastAPI).

MIT License - Copyright (c) 2025 BookMagic
"""

import argparse
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import Config, add_config_arguments, config_from_args
from .console import console
from .errors import (
    ConversionError,
    InputMissingError,
    InvalidProjectIdError,
    PackagingError,
    TemplateNotSelectedError,
    UploadValidationError,
)
from .locator import find_uploaded_file, validate_project_id
from .package import PackageAssembler
from .pdf import FREE_PLAN
from .preview import generate_preview
from .store import ProjectStore
from .templates import is_known_template, list_templates
from .uploads import UploadService, format_file_size
from .worker import ExportPipeline


class TemplateSelectionRequest(BaseModel):
    templateId: str = Field(..., min_length=1)


class PreviewRequest(BaseModel):
    projectId: str = Field(..., min_length=1)
    templateId: Optional[str] = None
    refresh: bool = False


class ExportRequest(BaseModel):
    projectId: str = Field(..., min_length=1)
    templateId: str = Field(..., min_length=1)
    plan: str = FREE_PLAN


def create_app(config: Optional[Config] = None, store: Optional[ProjectStore] = None,
               pipeline_factory: Optional[Callable[[Config], ExportPipeline]] = None) -> FastAPI:
    """Build the application around one configuration and project store."""
    config = config or Config()
    store = store or ProjectStore()
    pipeline_factory = pipeline_factory or ExportPipeline
    uploads = UploadService(config, store)
    assembler = PackageAssembler(config)

    app = FastAPI(
        title="BookMagic",
        description="Manuscript to PDF/EPUB publishing bundle conversion",
        version=__version__,
    )
    app.state.config = config
    app.state.store = store

    def _checked_id(project_id: str) -> str:
        try:
            return validate_project_id(project_id)
        except InvalidProjectIdError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Simple readiness probe."""
        return {"status": "ok"}

    @app.get("/templates")
    def templates() -> List[Dict[str, Any]]:
        return [template.to_dict() for template in list_templates()]

    @app.post("/upload")
    async def upload(file: UploadFile = File(...), projectId: str = Form(...)) -> Dict[str, Any]:
        """Validate and store a manuscript; rejected files are never written."""
        _checked_id(projectId)
        # Read one byte past the limit so oversize files are detected without buffering them whole
        data = await file.read(config.get_max_upload_bytes() + 1)
        try:
            record = uploads.save_upload(projectId, file.filename or "", data)
        except UploadValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        finally:
            await file.close()

        return {
            "success": True,
            "message": "File uploaded successfully",
            **record.to_dict(),
            "fileSizeFormatted": format_file_size(record.file_size),
        }

    @app.put("/projects/{project_id}/template")
    def select_template(project_id: str, payload: TemplateSelectionRequest) -> Dict[str, Any]:
        _checked_id(project_id)
        if not is_known_template(payload.templateId):
            raise HTTPException(status_code=400, detail=f"Unknown template '{payload.templateId}'")
        selection = store.select_template(project_id, payload.templateId)
        return {"success": True, **selection.to_dict()}

    @app.get("/projects/{project_id}")
    def project(project_id: str) -> Dict[str, Any]:
        _checked_id(project_id)
        record = store.get_upload(project_id)
        selection = store.get_template_selection(project_id)
        source = find_uploaded_file(project_id, config.get_uploads_dir())
        return {
            "projectId": project_id,
            "upload": record.to_dict() if record else None,
            "uploadedFile": str(source) if source else None,
            "template": selection.to_dict() if selection else None,
            "export": assembler.export_status(project_id),
        }

    def _preview(project_id: str, template_id: Optional[str], refresh: bool) -> Dict[str, Any]:
        _checked_id(project_id)
        template_id = template_id or store.get_selected_template(project_id)
        try:
            result = generate_preview(project_id, template_id, config, use_cache=not refresh)
        except InputMissingError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except TemplateNotSelectedError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except OSError as exc:
            console.error(f"Preview generation failed for {project_id}: {exc}")
            raise HTTPException(status_code=500, detail=f"Preview generation failed: {exc}") from exc
        return {**result.summary(), "html": result.html}

    @app.get("/preview")
    def preview(projectId: str, templateId: Optional[str] = None, refresh: bool = False) -> Dict[str, Any]:
        return _preview(projectId, templateId, refresh)

    @app.post("/preview")
    def preview_post(payload: PreviewRequest) -> Dict[str, Any]:
        return _preview(payload.projectId, payload.templateId, payload.refresh)

    @app.post("/export")
    async def export(payload: ExportRequest) -> Dict[str, Any]:
        """Run the full pipeline and report artifact readiness."""
        _checked_id(payload.projectId)
        pipeline = pipeline_factory(config)
        try:
            result = await pipeline.convert(payload.projectId, payload.templateId, payload.plan)
        except (ConversionError, PackagingError, OSError) as exc:
            console.error(f"Export failed for {payload.projectId}: {exc}")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        finally:
            await pipeline.close()
        return {**result.summary(), "status": assembler.export_status(payload.projectId)}

    @app.get("/export/{project_id}")
    def export_status(project_id: str) -> Dict[str, Any]:
        _checked_id(project_id)
        return {"projectId": project_id, **assembler.export_status(project_id)}

    @app.get("/exports/{project_id}/{file_name}")
    def download(project_id: str, file_name: str) -> FileResponse:
        export_dir = assembler.project_export_dir(_checked_id(project_id))
        allowed = {f"{project_id}.pdf", f"{project_id}.epub", "export.zip"}
        if file_name not in allowed:
            raise HTTPException(status_code=404, detail=f"Unknown export file '{file_name}'")
        path = Path(export_dir) / file_name
        if not path.is_file():
            raise HTTPException(status_code=404, detail=f"{file_name} is not ready yet")
        return FileResponse(path, filename=file_name)

    return app


app = create_app()


def serve():
    """Entry point for bookmagic-server."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the BookMagic HTTP API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    add_config_arguments(parser)
    args = parser.parse_args()

    config = config_from_args(args)
    console.set_debug(config.is_debug())
    config.ensure_directories()
    console.info(f"Serving BookMagic on http://{args.host}:{args.port}")
    uvicorn.run(create_app(config), host=args.host, port=args.port)


if __name__ == "__main__":
    serve()
