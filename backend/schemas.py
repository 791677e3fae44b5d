"""
schemas.py — Kanoon Gateway
Pydantic models for the gateway boundary.

Three groups:
  - inbound request parameters (SearchQuery, SearchFilters, DocumentRequest)
  - upstream payloads as Indian Kanoon sends them (every field optional,
    unknown keys kept so new upstream fields pass through untouched)
  - the normalized client-facing contracts (SearchResultSet, DocumentRecord,
    ErrorResponse, summaries)
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Inbound requests
# ---------------------------------------------------------------------------


FILTER_FIELDS = ("doctypes", "fromdate", "todate", "title", "cite", "author", "bench")


class SearchFilters(BaseModel):
    doctypes: Optional[str] = Field(default=None, description="Comma-separated doc types, e.g. 'supremecourt,delhi'")
    fromdate: Optional[str] = Field(default=None, description="DD-MM-YYYY")
    todate: Optional[str] = Field(default=None, description="DD-MM-YYYY")
    title: Optional[str] = None
    cite: Optional[str] = None
    author: Optional[str] = None
    bench: Optional[str] = None


class SearchQuery(BaseModel):
    form_input: str = Field(min_length=1, description="Free-text query, sent upstream as formInput")
    pagenum: int = Field(default=0, ge=0)
    maxcites: int = Field(default=5, ge=0)
    filters: SearchFilters = Field(default_factory=SearchFilters)

    def upstream_params(self) -> Dict[str, str]:
        """Query string for POST /search/. Unset filters are left out."""
        params = {
            "formInput": self.form_input,
            "pagenum": str(self.pagenum),
            "maxcites": str(self.maxcites),
        }
        for name in FILTER_FIELDS:
            value = getattr(self.filters, name)
            if value:
                params[name] = value
        return params


class DocumentRequest(BaseModel):
    doc_id: str = Field(min_length=1)
    params: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="Forwarded verbatim in request order, repeated keys kept, e.g. maxcites / maxcitedby",
    )


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


class Citation(BaseModel):
    model_config = ConfigDict(extra="allow")

    tid: Optional[Union[int, str]] = None
    title: Optional[str] = None


class SearchDoc(BaseModel):
    model_config = ConfigDict(extra="allow")

    tid: Optional[Union[int, str]] = None
    title: Optional[str] = None
    headline: Optional[str] = None
    docsource: Optional[str] = None
    publishdate: Optional[str] = None
    author: Optional[str] = None
    authorEncoded: Optional[str] = None
    authorid: Optional[Union[int, str]] = None
    bench: Optional[List[Any]] = None
    cites: Optional[List[Citation]] = None
    doctype: Optional[Union[int, str]] = None


class UpstreamSearchPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    # entries are checked one by one in normalize_search
    docs: Optional[List[Any]] = None
    categories: Optional[List[Any]] = None
    found: Optional[Union[int, str]] = None


class UpstreamDocumentPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    doc: Optional[str] = None
    title: Optional[str] = None
    citeList: Optional[List[Citation]] = None
    citedbyList: Optional[List[Citation]] = None


# ---------------------------------------------------------------------------
# Client-facing contracts
# ---------------------------------------------------------------------------


class SearchResultSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    docs: List[SearchDoc] = []
    categories: List[Any] = []
    found: Union[int, str] = 0
    encoded_form_input: str = Field(alias="encodedformInput")


class DocumentRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    doc: str = ""
    tid: str
    title: str = ""
    cite_list: List[Citation] = Field(default=[], alias="citeList")
    citedby_list: List[Citation] = Field(default=[], alias="citedbyList")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class SummaryRequest(BaseModel):
    text: str


class SummaryResponse(BaseModel):
    summary: str


class DocumentSummary(BaseModel):
    tid: str
    title: str
    summary: str


class ChatRequest(BaseModel):
    question: str


class ChatResponse(BaseModel):
    answer: str
