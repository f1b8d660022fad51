from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from app.config import AppSettings, load_settings
from app.wiring import (
    build_compiler,
    build_document_repository,
    build_normalizer,
    build_project_writer,
    build_store,
    store_from_document,
)
from domain.errors import (
    ElementNotFound,
    MalformedIngestionInput,
    PageNotFound,
    StructuralError,
)
from domain.models import Animation, Element, Position, Size, Variant
from domain.ports.repositories import DocumentRepository, ProjectWriter
from domain.services.compile_project import ProjectCompiler
from domain.services.normalize_ingestion import (
    INGESTION_HISTORY_LABEL,
    IngestionNormalizer,
    IngestionResult,
)
from domain.services.resolve_breakpoint_styles import resolve_preview_styles
from domain.services.scene_graph_store import SceneGraphStore

logger = logging.getLogger(__name__)


class CreateElementRequest(BaseModel):
    type: str
    parent_id: str
    position: Optional[Position] = None
    index: Optional[int] = None


class UpdateElementRequest(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)


class StylePatchRequest(BaseModel):
    styles: dict[str, Any] = Field(default_factory=dict)


class ReparentRequest(BaseModel):
    parent_id: str
    index: Optional[int] = None


class PageRequest(BaseModel):
    name: Optional[str] = None


class CurrentPageRequest(BaseModel):
    page_id: str


class CurrentBreakpointRequest(BaseModel):
    breakpoint_id: str


class SelectionRequest(BaseModel):
    element_ids: list[str] = Field(default_factory=list)
    additive: bool = False


class HistoryRequest(BaseModel):
    label: str = "Edit"


class IngestRequest(BaseModel):
    elements: list[Any] = Field(default_factory=list)
    parent_id: Optional[str] = None
    create_new_page: bool = False
    page_name: Optional[str] = None
    replace_page_id: Optional[str] = None


class CompileRequest(BaseModel):
    page_id: Optional[str] = None
    breakpoint_id: Optional[str] = None
    write: bool = False


@dataclass
class EditorContext:
    settings: AppSettings
    store: SceneGraphStore
    compiler: ProjectCompiler
    normalizer: IngestionNormalizer
    repository: DocumentRepository
    writer: ProjectWriter
    lock: threading.Lock = field(default_factory=threading.Lock)

    @contextmanager
    def edit(self, label: str) -> Iterator[SceneGraphStore]:
        with self.lock, self.store.gesture(label) as store:
            yield store


def get_context(request: Request) -> EditorContext:
    return cast(EditorContext, request.app.state.context)


def load_editor_store(settings: AppSettings, repository: DocumentRepository) -> SceneGraphStore:
    document_path = settings.compiler.document_path
    if not document_path.exists():
        return build_store(settings)
    logger.info("Loading design document from %s", document_path)
    return store_from_document(settings, repository.load(document_path))


def element_payload(element: Element) -> dict[str, Any]:
    return element.model_dump(mode="json")


def ingestion_payload(result: IngestionResult) -> dict[str, Any]:
    return {
        "created_ids": list(result.created_ids),
        "element_ids": list(result.element_ids),
        "skipped": [item.to_dict() for item in result.skipped],
        "page_id": result.page_id,
    }


def state_payload(store: SceneGraphStore) -> dict[str, Any]:
    return {
        "current_page_id": store.current_page_id,
        "current_breakpoint_id": store.current_breakpoint_id,
        "selected_ids": list(store.selected_ids),
        "history_index": store.history_index,
        "history_size": len(store.history),
        "can_undo": store.can_undo(),
        "can_redo": store.can_redo(),
    }


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.compiler.project_title)

    repository = build_document_repository(settings)
    store = load_editor_store(settings, repository)
    context = EditorContext(
        settings=settings,
        store=store,
        compiler=build_compiler(settings),
        normalizer=build_normalizer(settings, store),
        repository=repository,
        writer=build_project_writer(settings),
    )
    app.state.context = context

    @app.exception_handler(ElementNotFound)
    @app.exception_handler(PageNotFound)
    async def not_found_handler(request: Request, exc: Exception) -> ORJSONResponse:
        return ORJSONResponse({"detail": str(exc)}, status_code=404)

    @app.exception_handler(StructuralError)
    async def structural_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        return ORJSONResponse({"detail": str(exc)}, status_code=409)

    @app.exception_handler(MalformedIngestionInput)
    @app.exception_handler(ValueError)
    async def invalid_value_handler(request: Request, exc: Exception) -> ORJSONResponse:
        return ORJSONResponse({"detail": str(exc)}, status_code=422)

    # Document

    @app.get("/api/document")
    def api_document(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        with context.lock:
            document = context.store.to_document()
        return ORJSONResponse(document.model_dump(mode="json"))

    @app.post("/api/document/save")
    def api_save_document(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        target = context.settings.compiler.document_path
        with context.lock:
            context.repository.save(context.store.to_document(), target)
        logger.info("Saved design document to %s", target)
        return ORJSONResponse({"status": "ok", "path": str(target)})

    @app.get("/api/state")
    def api_state(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        return ORJSONResponse(state_payload(context.store))

    # Elements

    @app.get("/api/elements/{element_id}")
    def api_element(
        element_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.get("/api/elements/{element_id}/styles")
    def api_element_styles(
        element_id: str,
        breakpoint: Optional[str] = Query(default=None),
        variant: Optional[str] = Query(default=None),
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        with context.lock:
            element = context.store.get_element(element_id)
            snapshot = context.store.snapshot()
        return ORJSONResponse(resolve_preview_styles(element, snapshot, breakpoint, variant))

    @app.post("/api/elements", status_code=201)
    def api_create_element(
        body: CreateElementRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit(f"Add {body.type}") as store:
            element_id = store.create_element(
                body.type, body.parent_id, body.position, index=body.index
            )
        return ORJSONResponse(
            element_payload(context.store.get_element(element_id)), status_code=201
        )

    @app.delete("/api/elements/{element_id}")
    def api_delete_element(
        element_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Delete element") as store:
            removed = store.delete_element(element_id)
        return ORJSONResponse({"removed": removed})

    @app.patch("/api/elements/{element_id}")
    def api_update_element(
        element_id: str,
        body: UpdateElementRequest,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        with context.edit("Update element") as store:
            store.update_element(element_id, **body.fields)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.put("/api/elements/{element_id}/position")
    def api_move_element(
        element_id: str, body: Position, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Move element") as store:
            store.move_element(element_id, body)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.put("/api/elements/{element_id}/size")
    def api_resize_element(
        element_id: str, body: Size, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Resize element") as store:
            store.resize_element(element_id, body)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.patch("/api/elements/{element_id}/styles")
    def api_update_styles(
        element_id: str,
        body: StylePatchRequest,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        with context.edit("Update styles") as store:
            store.update_element_styles(element_id, body.styles)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.patch("/api/elements/{element_id}/responsive/{breakpoint_id}")
    def api_update_responsive_styles(
        element_id: str,
        breakpoint_id: str,
        body: StylePatchRequest,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        with context.edit(f"Update {breakpoint_id} styles") as store:
            store.update_responsive_styles(element_id, breakpoint_id, body.styles)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.delete("/api/elements/{element_id}/responsive/{breakpoint_id}")
    def api_clear_responsive_styles(
        element_id: str, breakpoint_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit(f"Reset {breakpoint_id} styles") as store:
            store.clear_responsive_styles(element_id, breakpoint_id)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.post("/api/elements/{element_id}/reparent")
    def api_reparent_element(
        element_id: str, body: ReparentRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Move to parent") as store:
            store.reparent_element(element_id, body.parent_id, body.index)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.post("/api/elements/{element_id}/variants")
    def api_add_variant(
        element_id: str, body: Variant, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Add variant") as store:
            store.add_variant(element_id, body)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.delete("/api/elements/{element_id}/variants/{variant_id}")
    def api_remove_variant(
        element_id: str, variant_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Remove variant") as store:
            removed = store.remove_variant(element_id, variant_id)
        return ORJSONResponse({"removed": removed})

    @app.post("/api/elements/{element_id}/animations")
    def api_add_animation(
        element_id: str, body: Animation, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Add animation") as store:
            store.add_animation(element_id, body)
        return ORJSONResponse(element_payload(context.store.get_element(element_id)))

    @app.delete("/api/elements/{element_id}/animations/{animation_id}")
    def api_remove_animation(
        element_id: str, animation_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Remove animation") as store:
            removed = store.remove_animation(element_id, animation_id)
        return ORJSONResponse({"removed": removed})

    # Pages

    @app.post("/api/pages", status_code=201)
    def api_add_page(
        body: PageRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Add page") as store:
            page_id = store.add_page(body.name)
        return ORJSONResponse(
            context.store.get_page(page_id).model_dump(mode="json"), status_code=201
        )

    @app.patch("/api/pages/{page_id}")
    def api_rename_page(
        page_id: str, body: PageRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        if not body.name:
            return ORJSONResponse({"detail": "name is required"}, status_code=400)
        with context.edit("Rename page") as store:
            store.rename_page(page_id, body.name)
        return ORJSONResponse(context.store.get_page(page_id).model_dump(mode="json"))

    @app.delete("/api/pages/{page_id}")
    def api_delete_page(
        page_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Delete page") as store:
            removed = store.delete_page(page_id)
        return ORJSONResponse({"removed": removed})

    @app.post("/api/pages/{page_id}/duplicate", status_code=201)
    def api_duplicate_page(
        page_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.edit("Duplicate page") as store:
            new_page_id = store.duplicate_page(page_id)
        return ORJSONResponse(
            context.store.get_page(new_page_id).model_dump(mode="json"), status_code=201
        )

    # View state

    @app.put("/api/state/current-page")
    def api_set_current_page(
        body: CurrentPageRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.lock:
            context.store.set_current_page(body.page_id)
        return ORJSONResponse(state_payload(context.store))

    @app.put("/api/state/current-breakpoint")
    def api_set_current_breakpoint(
        body: CurrentBreakpointRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.lock:
            context.store.set_current_breakpoint(body.breakpoint_id)
        return ORJSONResponse(state_payload(context.store))

    @app.put("/api/state/selection")
    def api_select(
        body: SelectionRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.lock:
            if body.element_ids:
                context.store.select(body.element_ids, additive=body.additive)
            else:
                context.store.deselect_all()
        return ORJSONResponse(state_payload(context.store))

    # History

    @app.post("/api/history")
    def api_save_history(
        body: HistoryRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.lock:
            context.store.save_to_history(body.label)
        return ORJSONResponse(state_payload(context.store))

    @app.post("/api/history/undo")
    def api_undo(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        with context.lock:
            changed = context.store.undo()
        return ORJSONResponse({"changed": changed, **state_payload(context.store)})

    @app.post("/api/history/redo")
    def api_redo(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        with context.lock:
            changed = context.store.redo()
        return ORJSONResponse({"changed": changed, **state_payload(context.store)})

    # Ingestion and compilation

    @app.post("/api/ingest", status_code=201)
    def api_ingest(
        body: IngestRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        if body.replace_page_id is not None:
            with context.edit(INGESTION_HISTORY_LABEL):
                result = context.normalizer.replace_page_content(
                    body.elements, body.replace_page_id
                )
            return ORJSONResponse(ingestion_payload(result), status_code=201)
        with context.lock:
            if body.create_new_page:
                result = context.normalizer.ingest_design_response(
                    {
                        "elements": body.elements,
                        "create_new_page": True,
                        "page_name": body.page_name,
                    }
                )
            else:
                result = context.normalizer.ingest(body.elements, body.parent_id)
        logger.info(
            "Ingested %d elements (%d skipped)", len(result.element_ids), len(result.skipped)
        )
        return ORJSONResponse(ingestion_payload(result), status_code=201)

    @app.post("/api/compile")
    def api_compile(
        body: CompileRequest, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        with context.lock:
            snapshot = context.store.snapshot()
        project = context.compiler.compile(snapshot, body.page_id, body.breakpoint_id)
        written: list[Path] = []
        if body.write:
            written = context.writer.write(project.files, context.settings.compiler.output_dir)
        return ORJSONResponse(
            {
                "files": project.files,
                "diagnostics": [item.to_dict() for item in project.diagnostics],
                "written": [str(path) for path in written],
            }
        )

    return app


app = create_app(load_settings())
