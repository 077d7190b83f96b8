"""Prompt templates for the fit scoring and photo classification calls."""

from __future__ import annotations

import json
from typing import Any, Dict

from models.clothing_item import ClothingItem
from models.measurements import UserMeasurements

BODY_ANALYSIS_SYSTEM = (
    "You are an AI clothing fit specialist. Analyze the user's body proportions from their "
    "photo and provided measurements (height: {height}in, weight: {weight}lbs, preferred size: "
    "{size}) to determine how clothing will fit them."
)

BODY_ANALYSIS_USER = (
    "Please analyze this person's body proportions and estimate their clothing measurements. "
    "Consider their height ({height}in) and weight ({weight}lbs). Focus on: shoulder width, "
    "chest/bust circumference, waist size, body type (slim, regular, athletic, etc.)."
)

FIT_ANALYSIS_SYSTEM = (
    "You are an expert clothing fit analyst. Based on the user's body analysis and the "
    "clothing item details, provide a comprehensive fit assessment."
)

FIT_ANALYSIS_USER = """
CLOTHING ITEM:
Name: {name}
Available Sizes: {sizes}
Size Chart: {size_chart}
Description: {description}
Material: {material}
Fit: {fit}
Full Page Content: {scraped_content}

USER BODY ANALYSIS:
{body_analysis}

USER MEASUREMENTS:
Height: {height}in
Weight: {weight}lbs
Preferred Size: {size}

Please provide:
1. Fit Score (0-100) for the preferred size {size}
2. Detailed fit recommendation
3. Alternative size suggestions if needed
4. Specific advice about how this item will fit (loose, tight, perfect, etc.)

Respond in JSON format:
{{
  "fitScore": number,
  "recommendation": "string",
  "sizeAdvice": "string",
  "alternativeSize": "string or null",
  "fitDetails": "string"
}}
"""

CLASSIFY_PHOTO_PROMPT = """Analyze this clothing item and provide details in valid JSON format.

IMPORTANT: Respond with ONLY valid JSON. No extra text, no markdown, no explanations, no code blocks.

Please provide:
1. Clothing category (shirt, pants, dress, jacket, sweater, etc.)
2. Primary color (be very specific: navy blue, forest green, etc.)
3. Style description (casual, formal, sporty, etc.)
4. Material type (cotton, polyester, denim, etc.)
5. Estimated size (if visible or can be inferred)
6. Any visible patterns or designs
7. If pants: estimate waist size and inseam/length in inches or centimeters.
8. If shirt/jacket/sweater: estimate chest width and shirt/jacket length in inches or centimeters.

Respond in this exact JSON format:
{
  "category": "string (clothing type)",
  "color": "string (specific color name)",
  "style": "string (style description)",
  "material": "string (material type)",
  "estimatedSize": "string (size if visible)",
  "patterns": "string (patterns or designs)",
  "description": "string (comprehensive description)",
  "measurements": {
    "waist": "number (waist in inches or cm, if pants)",
    "inseam": "number (inseam/length in inches or cm, if pants)",
    "chest": "number (chest width in inches or cm, if shirt/jacket)",
    "length": "number (shirt/jacket length in inches or cm, if shirt/jacket)"
  }
}"""

_SCRAPED_CONTENT_LIMIT = 4000


def _measurement_fields(measurements: UserMeasurements) -> Dict[str, Any]:
    return {
        "height": measurements.height_inches,
        "weight": measurements.weight_lbs,
        "size": measurements.preferred_size,
    }


def body_analysis_prompts(measurements: UserMeasurements) -> tuple[str, str]:
    fields = _measurement_fields(measurements)
    return BODY_ANALYSIS_SYSTEM.format(**fields), BODY_ANALYSIS_USER.format(**fields)


def fit_analysis_prompt(
    item: ClothingItem, body_analysis: str, measurements: UserMeasurements
) -> str:
    fields = _measurement_fields(measurements)
    if item.selected_size:
        fields["size"] = item.selected_size
    return FIT_ANALYSIS_USER.format(
        name=item.name,
        sizes=", ".join(item.sizes),
        size_chart=json.dumps(item.size_chart),
        description=item.description or "N/A",
        material=item.material or "N/A",
        fit=item.fit or "N/A",
        scraped_content=(item.scraped_content or "N/A")[:_SCRAPED_CONTENT_LIMIT],
        body_analysis=body_analysis,
        **fields,
    )


__all__ = [
    "CLASSIFY_PHOTO_PROMPT",
    "FIT_ANALYSIS_SYSTEM",
    "body_analysis_prompts",
    "fit_analysis_prompt",
]
