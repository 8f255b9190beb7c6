from .errors import IngestionError, UnsupportedFileError, EmptyDocumentError, AnalysisServiceError, IngestionInProgressError
from .hints import ProjectAnalysis, RoomHint, WorkHints, DimensionParser, RoomTypeDetector
from .document_extractor import ExtractedDocument, FileKind, classify_file, extract_document
from .adapter import ProjectIngestor, IngestionResult, project_from_analysis
