import re
import json
import logging
import unicodedata
from json import JSONDecodeError
from typing import Any, Iterable, List, Mapping, Optional

from openai import AsyncOpenAI, OpenAIError
from fastapi import APIRouter, Depends

from planifia.utilities.config import OPENAI_API_KEY, OPENAI_MODEL
from planifia.utilities.constants import FALLBACK_INGREDIENTS, INGREDIENTS_PROMPT_TEMPLATE
from planifia.utilities.exceptions import IngredientResolverError
from planifia.utilities.validators import DishInput
from planifia.api.dependencies import get_resolver

logger = logging.getLogger(__name__)


# === Normalization ===
def _fold(text: str) -> str:
    """Lower-case, strip accents and collapse whitespace for dictionary matching."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    plain = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(plain.lower().split())


def normalize_ingredients(names: Iterable[Any]) -> List[str]:
    """Trim names, drop blanks and case-insensitive duplicates, keep first-seen order."""
    result: List[str] = []
    seen = set()
    for raw in names or []:
        if isinstance(raw, Mapping):
            raw = raw.get("name") or raw.get("ingredient") or ""
        if not isinstance(raw, str):
            continue
        name = raw.strip()
        key = name.lower()
        if not name or key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


def lookup_fallback(dish_name: str, dictionary: Mapping[str, List[str]] = FALLBACK_INGREDIENTS) -> List[str]:
    """Look a dish up in the static dictionary.

    Exact (accent/case-insensitive) match first; otherwise the longest dictionary
    key that appears as whole words inside the dish name ("paella valenciana" -> "paella").
    """
    folded = _fold(dish_name)
    if not folded:
        return []
    index = {_fold(k): v for k, v in dictionary.items()}
    if folded in index:
        return normalize_ingredients(index[folded])
    best: Optional[str] = None
    for key in index:
        if re.search(rf"\b{re.escape(key)}\b", folded) and (best is None or len(key) > len(best)):
            best = key
    return normalize_ingredients(index[best]) if best else []


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if in_string:
            if ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            if start is None:
                start = i
            stack.append(ch)
        elif ch in "}]":
            if not stack:
                continue
            opening = stack.pop()
            if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                return None
            if not stack and start is not None:
                return text[start:i + 1]
    return None


def parse_ingredient_output(raw: str) -> List[str]:
    """Turn model output into a list of ingredient names.

    Accepts a bare JSON array, an object with an "ingredients" array, or either
    of those wrapped in prose / code fences. Raises IngredientResolverError when
    nothing usable is found.
    """
    text = (raw or "").strip()
    if not text:
        raise IngredientResolverError("AI returned an empty answer")
    candidates = [text]
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    candidates.append(cleaned)
    balanced = _extract_json_by_balancing(cleaned)
    if balanced:
        candidates.append(_remove_trailing_commas(balanced))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except JSONDecodeError:
            continue
        if isinstance(parsed, Mapping):
            parsed = parsed.get("ingredients") or parsed.get("ingredientes") or []
        if isinstance(parsed, list):
            return normalize_ingredients(parsed)
    raise IngredientResolverError("AI output is not a JSON ingredient list", {"output": text[:200]})


# === Resolver ===
class IngredientResolver:
    """Maps a dish name to an ordered list of ingredient names.

    Uses the OpenAI Responses API when an API key is configured and falls back to
    the static dictionary when the key is missing or the call/parse fails.
    """

    def __init__(self, api_key: Optional[str] = OPENAI_API_KEY, model: str = OPENAI_MODEL,
                 dictionary: Mapping[str, List[str]] = FALLBACK_INGREDIENTS):
        self.model = model
        self.dictionary = dictionary
        self._client = AsyncOpenAI(api_key=api_key) if api_key else None

    @property
    def ai_enabled(self) -> bool:
        return self._client is not None

    async def _ask_ai(self, dish_name: str) -> List[str]:
        response = await self._client.responses.create(
            model=self.model,
            input=INGREDIENTS_PROMPT_TEMPLATE + dish_name,
        )
        return parse_ingredient_output(response.output_text or "")

    async def resolve(self, dish_name: str) -> List[str]:
        dish = (dish_name or "").strip()
        if not dish:
            return []
        if self._client is not None:
            try:
                names = await self._ask_ai(dish)
                if names:
                    return names
                logger.warning("AI returned no ingredients for %r; using dictionary", dish)
            except (OpenAIError, IngredientResolverError):
                logger.exception("AI ingredient lookup failed for %r; using dictionary", dish)
        names = lookup_fallback(dish, self.dictionary)
        if not names:
            logger.info("No dictionary entry for %r", dish)
        return names


# === FastAPI Endpoint ===
router = APIRouter()


@router.post("/api/ai/ingredients")
async def preview_ingredients(payload: DishInput, resolver: IngredientResolver = Depends(get_resolver)):
    """Show the ingredients a dish would generate, without saving anything."""
    ingredients = await resolver.resolve(payload.dish_name)
    return {"dish_name": payload.dish_name, "ingredients": ingredients, "count": len(ingredients)}
