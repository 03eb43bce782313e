"""Generation client for the Groq API: one prompt in, one validated site out."""
import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from groq import AsyncGroq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError, APIConnectionError
from pydantic import ValidationError
import logging

from config import GROQ_API_KEY, GENERATION_MODEL, GENERATION_TEMPERATURE, GENERATION_MAX_TOKENS
from models.site import Artifact, SitePayload, RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


@dataclass
class ErrorDetail:
    """Structured error information attached to every GenerationError."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class GenerationError(Exception):
    """Base class for failures of a single generation call."""

    def __init__(self, error: ErrorDetail):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> str:
        return self.error.code


class EmptyResponse(GenerationError):
    """The service answered without any payload."""


class SchemaViolation(GenerationError):
    """A payload arrived but does not satisfy the site contract."""


class TransportFailure(GenerationError):
    """Network or service-level failure; the message is opaque."""


STYLE_RULESET = """You are SINKO, a world-class minimalist web designer. Your aesthetic is:
- High-End Editorial / Fashion / Art Gallery style.
- LOTS of whitespace (padding, margin).
- Large, bold Serif typography (Playfair Display) paired with clean Sans-Serif (Inter/Helvetica).
- High contrast: Black text on White/Off-White backgrounds.
- Minimalist grids.

Rules:
1. STYLING: Use Tailwind CSS via CDN.
2. IMAGES: Use 'https://picsum.photos/width/height?grayscale' for black and white placeholders.
3. FONTS: Import Google Fonts (Playfair Display, Inter) in the <head>.
4. DESIGN:
   - Avoid gradients, shadows, and rounded corners unless subtle.
   - Focus on sharp lines and typography.
   - Use 'tracking-wide' and 'leading-loose'.
5. INTERACTIVITY: You can add vanilla JavaScript inside <script> tags for basic interactions.
6. STRUCTURE: Return a COMPLETE, valid HTML5 file.
7. SCOPE: Treat the latest request as the whole task; earlier requests are not available to you."""


def parse_site_payload(text: str) -> SitePayload:
    """
    Parse and validate raw response text against the site contract.

    Args:
        text: Raw message content returned by the service

    Returns:
        Validated SitePayload

    Raises:
        SchemaViolation: If the text is not a JSON object with non-empty
            string ``body`` and ``summary`` fields
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaViolation(ErrorDetail(
            code="SCHEMA_VIOLATION",
            message="Response is not valid JSON.",
            details={"original_error": str(e)}
        ))

    if not isinstance(data, dict):
        raise SchemaViolation(ErrorDetail(
            code="SCHEMA_VIOLATION",
            message="Response is not a JSON object.",
            details={"received_type": type(data).__name__}
        ))

    try:
        return SitePayload.model_validate(data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise SchemaViolation(ErrorDetail(
            code="SCHEMA_VIOLATION",
            message=f"Response is missing or has empty required fields: {', '.join(fields)}",
            details={"fields": fields, "original_error": str(e)}
        ))


class GenerationClient:
    """Client that asks the Groq API for a complete single-file website."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client: Optional[AsyncGroq] = None
    ):
        """
        Initialize the generation client.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Model name (defaults to GENERATION_MODEL)
            temperature: Sampling temperature (defaults to GENERATION_TEMPERATURE)
            max_tokens: Completion budget (defaults to GENERATION_MAX_TOKENS)
            client: Preconfigured AsyncGroq instance, mainly for tests
        """
        self.model = model or GENERATION_MODEL
        self.temperature = GENERATION_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or GENERATION_MAX_TOKENS

        if client is not None:
            self.api_key = api_key
            self.client = client
        else:
            self.api_key = api_key or GROQ_API_KEY
            if not self.api_key:
                raise ValueError("GROQ_API_KEY must be provided or set in environment")
            self.client = AsyncGroq(api_key=self.api_key)

        logger.info(f"GenerationClient initialized with model {self.model}")

    @staticmethod
    def build_system_prompt() -> str:
        """Style ruleset followed by the JSON contract the reply must satisfy."""
        schema = json.dumps(RESPONSE_SCHEMA, indent=2)
        return (
            f"{STYLE_RULESET}\n\n"
            "Respond with a single JSON object that matches this JSON schema, and nothing else:\n"
            f"{schema}"
        )

    @staticmethod
    def build_prompt(prompt: str) -> str:
        return f"Build a website with the following requirements: {prompt}"

    async def generate(self, prompt: str) -> Artifact:
        """
        Run one request/response cycle against the service.

        Only ``prompt`` is sent; earlier conversation turns are not re-supplied.

        Args:
            prompt: Latest user request (non-empty, checked by the caller)

        Returns:
            Artifact stamped with the completion time

        Raises:
            EmptyResponse: The service returned no content
            SchemaViolation: The content does not satisfy the site contract
            TransportFailure: Network, authentication, rate-limit or other service error
        """
        start_time = time.time()

        try:
            logger.debug(f"Requesting site generation with model: {self.model}")

            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.build_system_prompt()},
                    {"role": "user", "content": self.build_prompt(prompt)}
                ],
                response_format={"type": "json_object"},
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )
        except RateLimitError as e:
            raise self._transport_failure(
                "RATE_LIMIT_ERROR", "Rate limit exceeded. Please try again in a few moments.", e, start_time
            )
        except AuthenticationError as e:
            raise self._transport_failure(
                "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.", e, start_time
            )
        except APITimeoutError as e:
            raise self._transport_failure(
                "TIMEOUT_ERROR", "Request timed out. Please try again.", e, start_time
            )
        except APIConnectionError as e:
            raise self._transport_failure(
                "CONNECTION_ERROR", "Could not reach the generation service.", e, start_time
            )
        except APIError as e:
            raise self._transport_failure(
                "API_ERROR", f"Groq API error: {str(e)}", e, start_time
            )
        except Exception as e:
            raise self._transport_failure(
                "UNKNOWN_ERROR", f"Unexpected error during generation: {str(e)}", e, start_time
            )

        latency_ms = int((time.time() - start_time) * 1000)

        text = None
        if response.choices:
            text = response.choices[0].message.content
        if not text or not text.strip():
            error = EmptyResponse(ErrorDetail(
                code="EMPTY_RESPONSE",
                message="No response from the generation service.",
                details={"model": self.model, "latency_ms": latency_ms}
            ))
            logger.error(
                f"Empty response: model={self.model}, latency={latency_ms}ms",
                extra={"error_code": error.code, "error_details": error.error.details}
            )
            raise error

        try:
            payload = parse_site_payload(text)
        except SchemaViolation as e:
            e.error.details.update({"model": self.model, "latency_ms": latency_ms})
            logger.error(
                f"Schema violation: model={self.model}, latency={latency_ms}ms, error={e}",
                extra={"error_code": e.code, "error_details": e.error.details}
            )
            raise

        usage = getattr(response, "usage", None)
        logger.info(
            f"Generated site: model={self.model}, "
            f"input_tokens={getattr(usage, 'prompt_tokens', None)}, "
            f"output_tokens={getattr(usage, 'completion_tokens', None)}, "
            f"latency={latency_ms}ms",
            extra={"model": self.model, "latency_ms": latency_ms}
        )

        return Artifact(
            body=payload.body,
            summary=payload.summary.strip(),
            created_at=datetime.now(timezone.utc)
        )

    def _transport_failure(
        self,
        code: str,
        message: str,
        exc: Exception,
        start_time: float
    ) -> TransportFailure:
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": self.model,
            "latency_ms": latency_ms,
            "original_error": str(exc)
        }
        if code == "RATE_LIMIT_ERROR":
            details["retry_after"] = 60
        if code == "UNKNOWN_ERROR":
            details["error_type"] = type(exc).__name__

        error = TransportFailure(ErrorDetail(code=code, message=message, details=details))
        logger.error(
            f"Transport failure ({code}): model={self.model}, latency={latency_ms}ms, error={exc}",
            exc_info=True,
            extra={"error_code": code, "error_details": details}
        )
        return error
