"""
Renovation Estimator - AI Ingestion Adapter

Turns an uploaded document into a ProjectModel. Extraction and the AI call
run in worker threads; the resulting hints are merged onto the domain model
through the same factories the wizard uses. Every failure leaves the
caller's project unchanged.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from calculator.project import EstimatorSession, ProjectModel
from calculator.room_geometry import Room, calculate_total_area, create_room_with_params
from calculator.work_categories import (
    DEFAULT_WORK_CATEGORIES,
    WorkCategories,
    clamp_underfloor_area,
    set_demolition,
    update_doors_windows,
    update_electrical,
    update_heating,
    update_plumbing,
)

from .document_extractor import ExtractedDocument, FileKind, extract_document
from .errors import AnalysisServiceError, EmptyDocumentError, IngestionError, IngestionInProgressError
from .hints import ProjectAnalysis, RoomHint, SubConfigHint, WorkHints

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    project: ProjectModel
    notes: List[str] = field(default_factory=list)


def room_from_hint(hint: RoomHint) -> Room:
    """Build a room from a hint; gaps are filled from the type defaults."""
    return create_room_with_params(
        room_type=hint.type,
        name=hint.name or "",
        length=hint.length or None,
        width=hint.width or None,
        height=hint.height or None,
        doors=hint.doors,
        windows=hint.windows,
        flooring=hint.flooring,
        walls=hint.walls,
        ceiling=hint.ceiling,
    )


def is_usable_room(hint: RoomHint) -> bool:
    """A hint is usable when at least one of its fields could be read."""
    return any(value is not None for value in hint.model_dump().values())


def _hint_changes(hint: Optional[SubConfigHint]) -> dict:
    if hint is None:
        return {}
    return {key: value for key, value in hint.model_dump().items() if value is not None}


def work_from_hints(hints: WorkHints, total_floor_area: float) -> WorkCategories:
    """Overlay suggested work onto the standard defaults. Missing values keep the default."""
    work = DEFAULT_WORK_CATEGORIES
    if hints.demolition is not None:
        work = set_demolition(work, hints.demolition)
    work = update_electrical(work, **_hint_changes(hints.electrical))
    work = update_plumbing(work, **_hint_changes(hints.plumbing))
    work = update_heating(work, **_hint_changes(hints.heating))
    work = update_doors_windows(work, **_hint_changes(hints.doors_windows))
    return clamp_underfloor_area(work, total_floor_area)


def project_from_analysis(analysis: ProjectAnalysis, current: ProjectModel) -> ProjectModel:
    """
    Merge an analysis onto the current project.

    Rooms and work are replaced wholesale; the quality level is adopted only
    when the analysis names one; the materials toggle is kept.

    Raises:
        AnalysisServiceError: If the analysis has no usable room
    """
    rooms = [room_from_hint(hint) for hint in analysis.rooms if is_usable_room(hint)]
    if not rooms:
        raise AnalysisServiceError("The analysis did not identify any rooms")

    return replace(
        current,
        rooms=tuple(rooms),
        work_categories=work_from_hints(analysis.work_suggestions, calculate_total_area(rooms)),
        quality_level=analysis.quality_level or current.quality_level,
    )


class ProjectIngestor:
    """
    Runs one ingestion at a time against an AI analyzer.

    The analyzer only needs an ``analyze_project(text, locale, image_base64,
    image_mime_type)`` method returning a ProjectAnalysis.
    """

    def __init__(self, analyzer, locale: str = "en"):
        self.analyzer = analyzer
        self.locale = locale
        self.analyzing = False

    def _begin(self):
        if self.analyzing:
            raise IngestionInProgressError("An analysis is already in progress")
        self.analyzing = True

    async def _analyze(self, document: ExtractedDocument, current: ProjectModel) -> IngestionResult:
        if document.kind == FileKind.IMAGE:
            if not document.image_base64:
                raise EmptyDocumentError("The image has no content")
        elif not document.text.strip():
            raise EmptyDocumentError("The document contains no text")

        logger.info("Analyzing %s (%s)", document.filename, document.kind.value)
        analysis = await asyncio.to_thread(
            self.analyzer.analyze_project,
            document.text,
            self.locale,
            document.image_base64,
            document.image_mime_type,
        )
        if not isinstance(analysis, ProjectAnalysis):
            analysis = ProjectAnalysis.model_validate(analysis)
        project = project_from_analysis(analysis, current)
        logger.info(
            "Ingested %s: %d rooms", document.filename, len(project.rooms),
            extra={"document": document.filename, "room_count": len(project.rooms)}
        )
        return IngestionResult(project=project, notes=list(analysis.notes))

    async def ingest(
        self,
        raw: Union[str, ExtractedDocument],
        current: ProjectModel
    ) -> IngestionResult:
        """
        Analyze already-extracted content and build a new project from it.

        Args:
            raw: Document text or an ExtractedDocument (e.g. an image)
            current: The project to merge onto; never modified

        Returns:
            IngestionResult with the new project and the service's notes

        Raises:
            IngestionError: On any failure; ``current`` stays valid
        """
        self._begin()
        try:
            document = raw if isinstance(raw, ExtractedDocument) else ExtractedDocument(
                kind=FileKind.TEXT, text=raw or ""
            )
            return await self._analyze(document, current)
        except IngestionError as e:
            logger.warning("Ingestion failed: %s", e.message)
            raise
        finally:
            self.analyzing = False

    async def ingest_file(
        self,
        filename: str,
        content: bytes,
        current: ProjectModel,
        content_type: Optional[str] = None
    ) -> IngestionResult:
        """Classify and extract an uploaded file, then analyze it."""
        self._begin()
        try:
            document = await asyncio.to_thread(extract_document, filename, content, content_type)
            return await self._analyze(document, current)
        except IngestionError as e:
            logger.warning("Ingestion of %s failed: %s", filename, e.message)
            raise
        finally:
            self.analyzing = False

    async def ingest_into(
        self,
        session: EstimatorSession,
        raw: Union[str, ExtractedDocument, None] = None,
        filename: Optional[str] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None
    ) -> IngestionResult:
        """Ingest text or a file and replace the session's project on success."""
        if content is not None:
            result = await self.ingest_file(filename or "document", content, session.project, content_type)
        else:
            result = await self.ingest(raw or "", session.project)
        session.apply_project(result.project)
        return result
