from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class Citation(BaseModel):
    text: str
    type: str = "article"
    year: str = ""
    authors: str = ""
    title: str = ""


# Request bodies. Every field is optional so that presence checks happen in
# the handlers and surface as 400 {"error": ...} rather than 422.


class GeneratePaperRequest(BaseModel):
    topic: Optional[str] = None


class FetchCitationsRequest(BaseModel):
    topic: Optional[str] = None


class FormatPaperRequest(BaseModel):
    paper: Any = None
    style: Optional[str] = None


class WritingContext(BaseModel):
    sectionTitle: Optional[str] = None
    paperTitle: Optional[str] = None
    abstract: Optional[str] = None


class ImproveWritingRequest(BaseModel):
    prompt: Optional[str] = None
    text: Optional[str] = None
    aspect: Optional[str] = None
    context: Optional[WritingContext] = None


class GeneratePaperResponse(BaseModel):
    success: bool = True
    paper: Dict[str, str]


class FetchCitationsResponse(BaseModel):
    citations: List[Citation]


class FormatPaperResponse(BaseModel):
    formattedPaper: str


class ImproveWritingResponse(BaseModel):
    improved: str
    changes: List[str]


# Gemini generateContent response shape (only the fields we read).


class GeminiPart(BaseModel):
    text: Optional[str] = None


class GeminiContent(BaseModel):
    role: Optional[str] = None
    parts: List[GeminiPart] = []


class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None
    finishReason: Optional[str] = None


class GeminiUsage(BaseModel):
    promptTokenCount: Optional[int] = None
    candidatesTokenCount: Optional[int] = None


class GeminiResponse(BaseModel):
    candidates: List[GeminiCandidate] = []
    usageMetadata: Optional[GeminiUsage] = None
