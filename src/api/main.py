"""
Renovation Estimator - FastAPI Backend API

This API provides endpoints for room geometry, the estimate wizard,
cost calculation, document ingestion and PDF reports.

The API is stateless: clients send the current project with every request.
"""

import os
import asyncio
import logging
from typing import Optional, List
from datetime import datetime

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from calculator import (
    CostEstimator,
    CostCategory,
    CostType,
    CeilingType,
    FlooringType,
    ProjectModel,
    QualityLevel,
    Room,
    RoomDimensions,
    RoomMaterials,
    RoomType,
    WallType,
    WizardState,
    WizardStep,
    WorkCategories,
    calculate_total_area,
    compare_quality_levels,
    create_room,
    generate_preset_rooms,
    update_room_dimensions,
    update_room_materials,
)
from calculator.room_geometry import clamp_dimensions
from calculator.work_categories import (
    DEFAULT_WORK_CATEGORIES,
    clamp_underfloor_area,
    set_demolition,
    update_doors_windows,
    update_electrical,
    update_heating,
    update_plumbing,
)
from ingestion import (
    AnalysisServiceError,
    EmptyDocumentError,
    IngestionError,
    IngestionInProgressError,
    ProjectIngestor,
    UnsupportedFileError,
)
from ingestion.project_analyzer import ProjectAnalyzer, PropertyType, RenovationParams, RenovationType
from api.logging_config import estimate_context, setup_logging_from_env
from api.pdf_generator import PDFReportGenerator

load_dotenv()

setup_logging_from_env()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Initialize FastAPI app
app = FastAPI(
    title="Renovation Estimator API",
    description="Room-based renovation cost estimation with AI document ingestion",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
estimator = CostEstimator()
pdf_generator = PDFReportGenerator()

# The AI client needs API keys, so it is only built on first use
_analyzer: Optional[ProjectAnalyzer] = None
_ingestor: Optional[ProjectIngestor] = None


def get_analyzer() -> ProjectAnalyzer:
    global _analyzer
    if _analyzer is None:
        try:
            _analyzer = ProjectAnalyzer()
        except ValueError as e:
            logger.error("AI service not configured: %s", e)
            raise HTTPException(status_code=503, detail=str(e))
    return _analyzer


def get_ingestor() -> ProjectIngestor:
    """Shared ingestor; its analyzing flag serializes uploads across requests."""
    global _ingestor
    if _ingestor is None:
        _ingestor = ProjectIngestor(get_analyzer(), locale=DEFAULT_LOCALE)
    return _ingestor


# ============================================================================
# Pydantic Models
# ============================================================================

class ApiModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DimensionsModel(ApiModel):
    length: float
    width: float
    height: float = 2.7
    doors: int = 1
    windows: int = 1


class MaterialsModel(ApiModel):
    flooring: FlooringType = FlooringType.LAMINATE
    walls: WallType = WallType.PAINT
    ceiling: CeilingType = CeilingType.PAINT


class SurfacesModel(ApiModel):
    floor_area: float
    wall_area: float
    ceiling_area: float
    perimeter: float
    corners: int = 4


class RoomModel(ApiModel):
    id: Optional[str] = None
    type: RoomType = RoomType.LIVING
    name: str = ""
    dimensions: DimensionsModel
    materials: MaterialsModel = Field(default_factory=MaterialsModel)
    computed: Optional[SurfacesModel] = None

    def to_room(self, clamp: bool = True) -> Room:
        """Build the domain Room. Surfaces are always recomputed, never trusted."""
        dimensions = RoomDimensions(**self.dimensions.model_dump())
        if clamp:
            dimensions = clamp_dimensions(dimensions)
        values = dict(
            type=self.type,
            dimensions=dimensions,
            materials=RoomMaterials(**self.materials.model_dump()),
            name=self.name,
        )
        if self.id:
            values["id"] = self.id
        return Room(**values)

    @classmethod
    def from_room(cls, room: Room) -> "RoomModel":
        return cls.model_validate(room)


class ElectricalModel(ApiModel):
    enabled: bool = True
    outlets: int = 10
    switches: int = 6
    lighting_points: int = 8
    ac_points: int = 1


class PlumbingModel(ApiModel):
    enabled: bool = True
    toilets: int = 1
    sinks: int = 2
    showers: int = 1
    bathtubs: int = 1


class HeatingModel(ApiModel):
    enabled: bool = True
    radiators: int = 4
    underfloor_area: float = 0
    boiler: bool = False


class DoorsWindowsModel(ApiModel):
    enabled: bool = True
    interior_doors: int = 4
    entrance_door: bool = False


class WorkCategoriesModel(ApiModel):
    demolition: bool = True
    electrical: ElectricalModel = Field(default_factory=ElectricalModel)
    plumbing: PlumbingModel = Field(default_factory=PlumbingModel)
    heating: HeatingModel = Field(default_factory=HeatingModel)
    doors_windows: DoorsWindowsModel = Field(default_factory=DoorsWindowsModel)

    def to_work(self, total_floor_area: float) -> WorkCategories:
        """Build WorkCategories through the clamping update functions."""
        work = set_demolition(DEFAULT_WORK_CATEGORIES, self.demolition)
        work = update_electrical(work, **self.electrical.model_dump())
        work = update_plumbing(work, **self.plumbing.model_dump())
        work = update_heating(work, **self.heating.model_dump())
        work = update_doors_windows(work, **self.doors_windows.model_dump())
        return clamp_underfloor_area(work, total_floor_area)


class ProjectPayload(ApiModel):
    rooms: List[RoomModel] = Field(default_factory=list)
    work_categories: WorkCategoriesModel = Field(default_factory=WorkCategoriesModel)
    quality_level: QualityLevel = QualityLevel.STANDARD
    include_materials: bool = True

    def to_project(self) -> ProjectModel:
        rooms = tuple(room.to_room() for room in self.rooms)
        return ProjectModel(
            rooms=rooms,
            work_categories=self.work_categories.to_work(calculate_total_area(list(rooms))),
            quality_level=self.quality_level,
            include_materials=self.include_materials,
        )

    @classmethod
    def from_project(cls, project: ProjectModel) -> "ProjectPayload":
        return cls(
            rooms=[RoomModel.from_room(room) for room in project.rooms],
            work_categories=WorkCategoriesModel.model_validate(project.work_categories),
            quality_level=project.quality_level,
            include_materials=project.include_materials,
        )


class BreakdownItemModel(ApiModel):
    id: str
    name: str
    category: CostCategory
    quantity: float
    unit: str
    unit_price: float
    total: float
    cost_type: CostType


class RoomBreakdownModel(ApiModel):
    room_id: str
    room_name: str
    items: List[BreakdownItemModel]
    shared_cost: float
    subtotal: float


class CategoryBreakdownModel(ApiModel):
    category: CostCategory
    items: List[BreakdownItemModel]
    subtotal: float


class CalculationResponse(ApiModel):
    by_room: List[RoomBreakdownModel]
    by_category: List[CategoryBreakdownModel]
    total_labor: float
    total_materials: float
    grand_total: float
    low_estimate: int
    high_estimate: int


class QualityComparisonResponse(BaseModel):
    economy: float
    standard: float
    premium: float


class CreateRoomRequest(BaseModel):
    type: RoomType
    name: str = ""


class DimensionsUpdate(BaseModel):
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    doors: Optional[int] = None
    windows: Optional[int] = None


class MaterialsUpdate(BaseModel):
    flooring: Optional[FlooringType] = None
    walls: Optional[WallType] = None
    ceiling: Optional[CeilingType] = None


class UpdateRoomRequest(BaseModel):
    room: RoomModel
    dimensions: Optional[DimensionsUpdate] = None
    materials: Optional[MaterialsUpdate] = None


class WizardRequest(BaseModel):
    step: WizardStep = WizardStep.ROOMS
    rooms: List[RoomModel] = Field(default_factory=list)
    target: Optional[WizardStep] = None


class WizardResponse(BaseModel):
    step: WizardStep
    can_advance: bool
    is_complete: bool


class IngestResponse(BaseModel):
    project: ProjectPayload
    notes: List[str] = []
    total_floor_area: float


class QuickEstimateRequest(BaseModel):
    area: float = Field(gt=0)
    rooms: int = Field(ge=1)
    bathrooms: int = Field(ge=0)
    renovation_type: RenovationType = RenovationType.STANDARD
    include_kitchen: bool = True
    include_furniture: bool = False
    property_type: PropertyType = PropertyType.APARTMENT


class QuickEstimateResponse(BaseModel):
    total_estimate: float
    timeline: str
    tips: List[str]


class PDFReportRequest(BaseModel):
    project_name: str = "Renovation Estimate"
    project: ProjectPayload


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


# Ingestion failures by HTTP status
INGESTION_STATUS = (
    (UnsupportedFileError, 400),
    (EmptyDocumentError, 400),
    (IngestionInProgressError, 409),
    (AnalysisServiceError, 502),
)


def ingestion_http_error(error: IngestionError) -> HTTPException:
    status_code = next((code for kind, code in INGESTION_STATUS if isinstance(error, kind)), 400)
    return HTTPException(
        status_code=status_code,
        detail={"message": error.message, "retryable": error.retryable}
    )


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=API_VERSION
    )


@app.post("/api/v1/rooms", response_model=RoomModel)
async def create_room_endpoint(request: CreateRoomRequest):
    """Create a room with the default dimensions and finishes of its type."""
    return RoomModel.from_room(create_room(request.type, request.name))


@app.get("/api/v1/rooms/presets/{preset}", response_model=List[RoomModel])
async def get_preset_rooms(preset: str):
    """Rooms of an apartment preset: studio, 1br, 2br or 3br."""
    try:
        rooms = generate_preset_rooms(preset)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [RoomModel.from_room(room) for room in rooms]


@app.post("/api/v1/rooms/update", response_model=RoomModel)
async def update_room_endpoint(request: UpdateRoomRequest):
    """
    Apply a partial dimension and/or material update to a room.

    Returns: The updated room with clamped dimensions and recomputed surfaces
    """
    room = request.room.to_room(clamp=False)
    if request.dimensions:
        room = update_room_dimensions(room, **request.dimensions.model_dump(exclude_none=True))
    if request.materials:
        room = update_room_materials(room, **request.materials.model_dump(exclude_none=True))
    return RoomModel.from_room(room)


@app.post("/api/v1/calculate", response_model=CalculationResponse)
async def calculate_estimate(payload: ProjectPayload):
    """
    Calculate the itemized estimate of a project.

    Returns: By-room and by-category breakdowns, totals and the expected range
    """
    project = payload.to_project()
    result = estimator.calculate(
        list(project.rooms),
        project.work_categories,
        project.quality_level,
        project.include_materials
    )
    logger.info(
        "Calculated estimate for %d rooms", len(project.rooms), extra=estimate_context(project, result)
    )
    return CalculationResponse.model_validate(result)


@app.post("/api/v1/compare", response_model=QualityComparisonResponse)
async def compare_levels(payload: ProjectPayload):
    """Grand total of the project at every quality level."""
    project = payload.to_project()
    totals = compare_quality_levels(
        list(project.rooms),
        project.work_categories,
        project.include_materials,
        estimator.catalog
    )
    return QualityComparisonResponse(**totals)


@app.post("/api/v1/wizard/{action}", response_model=WizardResponse)
async def wizard_action(action: str, request: WizardRequest):
    """
    Move the wizard: 'next', 'prev' or 'go_to' (with a target step).

    Invalid transitions leave the step unchanged.
    """
    # Rooms are taken as entered so unfinished dimensions still block the wizard
    rooms = [room.to_room(clamp=False) for room in request.rooms]
    state = WizardState(request.step)

    if action == "next":
        state = state.next_step(rooms)
    elif action == "prev":
        state = state.prev_step()
    elif action == "go_to":
        if request.target is None:
            raise HTTPException(status_code=422, detail="'target' is required for go_to")
        state = state.go_to(request.target, rooms)
    else:
        raise HTTPException(status_code=404, detail=f"Unknown wizard action '{action}'")

    return WizardResponse(
        step=state.step,
        can_advance=state.can_advance(rooms),
        is_complete=state.is_complete
    )


@app.post("/api/v1/ingest", response_model=IngestResponse)
async def ingest_document(
    file: UploadFile = File(...),
    project: Optional[str] = Form(None),
    ingestor: ProjectIngestor = Depends(get_ingestor)
):
    """
    Build a project from an uploaded spreadsheet, PDF, text file or photo.

    The current project (JSON, optional) supplies what the document doesn't:
    the materials toggle and, unless the document names one, the quality level.
    Accepts: XLSX, CSV, PDF, TXT, PNG, JPG, WEBP
    """
    try:
        current = ProjectPayload.model_validate_json(project).to_project() if project else ProjectModel()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid project: {e}")

    content = await file.read()
    try:
        result = await ingestor.ingest_file(file.filename or "document", content, current, file.content_type)
    except IngestionError as e:
        raise ingestion_http_error(e)

    return IngestResponse(
        project=ProjectPayload.from_project(result.project),
        notes=result.notes,
        total_floor_area=result.project.total_floor_area
    )


@app.post("/api/v1/quick-estimate", response_model=QuickEstimateResponse)
async def quick_estimate(
    request: QuickEstimateRequest,
    locale: str = Query(DEFAULT_LOCALE),
    analyzer: ProjectAnalyzer = Depends(get_analyzer)
):
    """Rough whole-property budget from a few parameters, answered by the AI service."""
    params = RenovationParams(**request.model_dump())
    try:
        quote = await asyncio.to_thread(analyzer.calculate_renovation, params, locale)
    except AnalysisServiceError as e:
        raise ingestion_http_error(e)

    return QuickEstimateResponse(
        total_estimate=quote.total_estimate,
        timeline=quote.timeline,
        tips=quote.tips
    )


@app.post("/api/v1/generate-pdf")
async def generate_pdf_report(request: PDFReportRequest):
    """
    Generate a PDF report of a project estimate.

    Returns: PDF file as a downloadable stream
    """
    project = request.project.to_project()
    rooms = list(project.rooms)
    result = estimator.calculate(rooms, project.work_categories, project.quality_level, project.include_materials)
    level_totals = compare_quality_levels(
        rooms, project.work_categories, project.include_materials, estimator.catalog
    )

    pdf_buffer = pdf_generator.generate_report(
        project_name=request.project_name,
        rooms=rooms,
        result=result,
        quality_level=project.quality_level,
        level_totals=level_totals,
        include_materials=project.include_materials
    )

    safe_project_name = "".join(c for c in request.project_name if c.isalnum() or c in (' ', '-', '_')).rstrip()
    download_filename = f"{safe_project_name or 'estimate'}_report.pdf"
    logger.info(
        "Generated report %s", download_filename,
        extra={"document": download_filename, **estimate_context(project, result)}
    )

    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{download_filename}"'
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
