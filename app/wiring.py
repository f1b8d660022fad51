from __future__ import annotations

from adapters.filesystem.document_repository import FileSystemDocumentRepository
from adapters.filesystem.project_writer import FileSystemProjectWriter
from adapters.layout.auto_layout import AutoLayoutEngine
from adapters.layout.text_metrics import HeuristicTextMeasurer
from adapters.templates.jinja_templates import JinjaProjectTemplates
from app.config import AppSettings
from domain.models import DesignDocument
from domain.ports.layout import LayoutEngine
from domain.ports.repositories import DocumentRepository, ProjectWriter
from domain.services.compile_project import CompileOptions, ProjectCompiler
from domain.services.emit_markup import MarkupEmitter
from domain.services.normalize_ingestion import IngestionNormalizer
from domain.services.scene_graph_store import SceneGraphStore


def build_store(settings: AppSettings, project_name: str = "Untitled") -> SceneGraphStore:
    compiler = settings.compiler
    return SceneGraphStore(
        project_name=project_name,
        breakpoints=compiler.resolved_breakpoints(),
        history_limit=compiler.history_limit,
    )


def store_from_document(settings: AppSettings, document: DesignDocument) -> SceneGraphStore:
    return SceneGraphStore.from_document(document, history_limit=settings.compiler.history_limit)


def build_layout_engine(settings: AppSettings) -> LayoutEngine:
    return AutoLayoutEngine(HeuristicTextMeasurer())


def build_compiler(settings: AppSettings) -> ProjectCompiler:
    compiler = settings.compiler
    return ProjectCompiler(
        build_layout_engine(settings),
        JinjaProjectTemplates(),
        emitter=MarkupEmitter(default_image_src=compiler.default_image_src),
        options=CompileOptions(
            project_title=compiler.project_title,
            package_name=compiler.package_name,
            responsive=compiler.responsive,
        ),
    )


def build_normalizer(settings: AppSettings, store: SceneGraphStore) -> IngestionNormalizer:
    return IngestionNormalizer(store, limits=settings.compiler.repair_limits())


def build_document_repository(settings: AppSettings) -> DocumentRepository:
    return FileSystemDocumentRepository()


def build_project_writer(settings: AppSettings) -> ProjectWriter:
    return FileSystemProjectWriter()
