"""
Renovation Estimator - Project Analyzer

Client for the external AI classification service. Sends extracted project
text (or a photo) to a vision-capable model and returns the loosely-structured
analysis as ProjectAnalysis hints.

Supports OpenAI GPT-4o and Anthropic Claude.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from dotenv import load_dotenv
from openai import OpenAI

from .errors import AnalysisServiceError
from .hints import ProjectAnalysis

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RenovationType(str, Enum):
    COSMETIC = "cosmetic"
    STANDARD = "standard"
    FULL = "full"
    LUXURY = "luxury"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"


@dataclass
class RenovationParams:
    """Inputs of the quick whole-property estimate."""
    area: float
    rooms: int
    bathrooms: int
    renovation_type: RenovationType = RenovationType.STANDARD
    include_kitchen: bool = True
    include_furniture: bool = False
    property_type: PropertyType = PropertyType.APARTMENT


@dataclass
class RenovationQuote:
    total_estimate: float
    timeline: str = ""
    tips: List[str] = field(default_factory=list)


def extract_json(raw_response: str) -> dict:
    """
    Decode a JSON object from a model response, tolerating markdown code fences.

    Raises:
        AnalysisServiceError: If the response holds no JSON object
    """
    json_str = raw_response or ""
    if "```json" in json_str:
        json_str = json_str.split("```json")[1].split("```")[0]
    elif "```" in json_str:
        json_str = json_str.split("```")[1].split("```")[0]

    try:
        data = json.loads(json_str.strip())
    except json.JSONDecodeError as e:
        raise AnalysisServiceError(f"Failed to parse AI response: {e}") from e

    if not isinstance(data, dict):
        raise AnalysisServiceError("AI response is not a JSON object")
    return data


class ProjectAnalyzer:
    """
    Extracts rooms, work suggestions and a quality level from project documents
    using an AI model.
    """

    # The prompt that instructs the model how to read project documents
    ANALYSIS_PROMPT = """You are an experienced renovation estimator. Read the project material below (a spreadsheet, a document, or a photo/floor plan) and describe the rooms and the renovation work it asks for.

For each room you can identify, report:
- type: one of living, bedroom, bathroom, kitchen, hallway, balcony
- name: the room label used in the material
- length, width, height: in meters, numbers only
- doorCount, windowCount: integers
- flooring: one of laminate, parquet, tile, vinyl, carpet
- wallFinish: one of paint, wallpaper, tile, decorative_plaster
- ceilingFinish: one of paint, stretch, drywall, suspended

Leave out any field you cannot read or infer. Do NOT invent values and NEVER return 0 for a dimension.

Return a JSON object with the following structure:
{
    "rooms": [ { "type": "...", "name": "...", "length": 4.2, "width": 3.1 } ],
    "workSuggestions": {
        "demolition": true,
        "electrical": {"enabled": true, "outlets": 10, "switches": 6, "lightingPoints": 8, "acPoints": 1},
        "plumbing": {"enabled": true, "toilets": 1, "sinks": 2, "showers": 1, "bathtubs": 1},
        "heating": {"enabled": true, "radiators": 4, "underfloorArea": 0, "boiler": false},
        "doorsWindows": {"enabled": true, "interiorDoors": 4, "entranceDoor": false}
    },
    "qualityLevel": "economy, standard or premium (omit if unclear)",
    "notes": ["Anything the estimator should double-check"]
}

Only include work categories and counts the material mentions. Write the notes in the language with locale code "{locale}".

Return ONLY the JSON object, no additional text."""

    RENOVATION_PROMPT = """You are an experienced renovation estimator. Estimate the total renovation budget for this property:
{params}

Return a JSON object: {{"totalEstimate": number, "timeline": "expected duration", "tips": ["practical tips"]}}
Write the timeline and tips in the language with locale code "{locale}". Return ONLY the JSON object."""

    # Supported AI providers
    PROVIDER_OPENAI = "openai"
    PROVIDER_CLAUDE = "claude"

    def __init__(self, api_key: Optional[str] = None, model: str = None, provider: str = None):
        """
        Initialize the analyzer.

        Args:
            api_key: API key for the provider. Defaults to env var based on provider.
            model: Model to use. Defaults to env var or provider's best model.
            provider: AI provider to use ('openai' or 'claude'). Defaults to AI_PROVIDER env var or 'openai'.
        """
        self.provider = provider or os.getenv("AI_PROVIDER", self.PROVIDER_OPENAI).lower()

        if self.provider == self.PROVIDER_CLAUDE:
            self._init_claude(api_key, model)
        else:
            self._init_openai(api_key, model)

    def _init_openai(self, api_key: Optional[str], model: Optional[str]):
        """Initialize OpenAI client."""
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key or self.api_key == "your_openai_api_key_here":
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4o")
        self.client = OpenAI(api_key=self.api_key)

    def _init_claude(self, api_key: Optional[str], model: Optional[str]):
        """Initialize Anthropic Claude client."""
        import anthropic

        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError("Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable.")
        self.model = model or os.getenv("CLAUDE_MODEL", "claude-3-5-sonnet-20241022")
        self.client = anthropic.Anthropic(api_key=self.api_key)

    @property
    def model_used(self) -> str:
        return f"{self.provider}:{self.model}"

    def _call_openai(self, prompt: str, image_data: Optional[str], media_type: Optional[str]) -> str:
        """Call OpenAI chat completions, with an optional image."""
        content = [{"type": "text", "text": prompt}]
        if image_data:
            content.append({
                "type": "image_url",
                "image_url": {
                    "url": f"data:{media_type};base64,{image_data}",
                    "detail": "high"
                }
            })

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": content}],
            max_tokens=2000,
            temperature=0
        )
        return response.choices[0].message.content

    def _call_claude(self, prompt: str, image_data: Optional[str], media_type: Optional[str]) -> str:
        """Call Anthropic messages API, with an optional image."""
        content = []
        if image_data:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": image_data
                }
            })
        content.append({"type": "text", "text": prompt})

        response = self.client.messages.create(
            model=self.model,
            max_tokens=2000,
            messages=[{"role": "user", "content": content}]
        )
        return response.content[0].text

    def _complete(self, prompt: str, image_data: Optional[str] = None, media_type: Optional[str] = None) -> dict:
        """Send a prompt to the configured provider and decode its JSON answer."""
        try:
            if self.provider == self.PROVIDER_CLAUDE:
                raw_response = self._call_claude(prompt, image_data, media_type)
            else:
                raw_response = self._call_openai(prompt, image_data, media_type)
        except Exception as e:
            logger.warning("AI request to %s failed: %s", self.model_used, e)
            raise AnalysisServiceError(f"AI service request failed: {e}") from e

        return extract_json(raw_response)

    def analyze_project(
        self,
        text: str,
        locale: str = "en",
        image_base64: Optional[str] = None,
        image_mime_type: Optional[str] = None
    ) -> ProjectAnalysis:
        """
        Analyze project material and return best-effort hints.

        Args:
            text: Extracted document text (may be empty when an image is sent)
            locale: Locale code for the notes
            image_base64: Optional base64-encoded image
            image_mime_type: MIME type of the image

        Returns:
            ProjectAnalysis; any field may be empty

        Raises:
            AnalysisServiceError: If the service fails or answers with no JSON
        """
        prompt = self.ANALYSIS_PROMPT.replace("{locale}", locale)
        if text:
            prompt += f"\n\nPROJECT MATERIAL:\n{text}"

        data = self._complete(prompt, image_base64, image_mime_type or 'image/png')
        return ProjectAnalysis.model_validate(data)

    def calculate_renovation(self, params: RenovationParams, locale: str = "en") -> RenovationQuote:
        """
        Ask the model for a quick whole-property budget.

        Raises:
            AnalysisServiceError: If the service fails or the answer has no estimate
        """
        described = "\n".join([
            f"- Area: {params.area} m²",
            f"- Rooms: {params.rooms}",
            f"- Bathrooms: {params.bathrooms}",
            f"- Renovation type: {RenovationType(params.renovation_type).value}",
            f"- Include kitchen: {'yes' if params.include_kitchen else 'no'}",
            f"- Include furniture: {'yes' if params.include_furniture else 'no'}",
            f"- Property type: {PropertyType(params.property_type).value}",
        ])
        data = self._complete(self.RENOVATION_PROMPT.format(params=described, locale=locale))

        try:
            total = float(data.get("totalEstimate", data.get("total_estimate")))
        except (TypeError, ValueError) as e:
            raise AnalysisServiceError("AI response has no total estimate") from e

        tips = data.get("tips") or []
        return RenovationQuote(
            total_estimate=max(0.0, total),
            timeline=str(data.get("timeline") or ""),
            tips=[str(tip) for tip in tips] if isinstance(tips, list) else [str(tips)],
        )
