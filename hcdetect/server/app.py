"""FastAPI application exposing the scanner to editors and other tools."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from hcdetect import __version__
from hcdetect.diagnostics import highlights, status_text, to_diagnostics
from hcdetect.scanner import scan

MAX_TEXT_LENGTH = 5_000_000

app = FastAPI(
    title="Hidden Character Detector API",
    description="Detect invisible and deceptive Unicode characters in text",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class ScanRequest(BaseModel):
    text: str = Field(..., max_length=MAX_TEXT_LENGTH)


class FindingOut(BaseModel):
    display: str
    codePoint: int
    startIndex: int
    startLine: int
    startColumn: int
    category: str
    message: str
    endIndex: int | None = None
    endLine: int | None = None
    endColumn: int | None = None


class ScanResponse(BaseModel):
    count: int
    status: str | None = None
    findings: list[FindingOut]


class Position(BaseModel):
    line: int
    character: int


class RangeOut(BaseModel):
    start: Position
    end: Position


class DiagnosticOut(BaseModel):
    range: RangeOut
    message: str
    code: str
    severity: str
    source: str


class HighlightsOut(BaseModel):
    ranges: list[RangeOut]
    gutterLines: list[int]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.post("/scan", response_model=ScanResponse, response_model_exclude_none=True)
async def scan_text(request: ScanRequest):
    """Scan text; single-character findings carry no end coordinates."""
    findings = scan(request.text)
    return ScanResponse(
        count=len(findings),
        status=status_text(len(findings)),
        findings=[FindingOut(**f.to_dict()) for f in findings],
    )


@app.post("/diagnostics", response_model=list[DiagnosticOut])
async def diagnostics(request: ScanRequest):
    """Scan text and return editor diagnostics (zero-based, end-exclusive)."""
    return [d.to_dict() for d in to_diagnostics(scan(request.text))]


@app.post("/highlights", response_model=HighlightsOut)
async def highlight_ranges(request: ScanRequest):
    """Inline highlight ranges plus the zero-based lines that get a gutter mark."""
    ranges, lines = highlights(scan(request.text))
    return HighlightsOut(
        ranges=[
            RangeOut(
                start=Position(line=r.start_line, character=r.start_character),
                end=Position(line=r.end_line, character=r.end_character),
            )
            for r in ranges
        ],
        gutterLines=lines,
    )
