from typing import List, Optional
from pydantic import BaseModel, Field


# Extraction models
class PageData(BaseModel):
    title: str = ""
    description: str = ""
    h1: str = ""
    h1_count: int = 0
    h2_count: int = 0
    link_count: int = 0
    image_count: int = 0
    word_count: int = 0
    has_viewport: bool = False
    mobile_optimized: bool = False
    scripts: List[str] = Field(default_factory=list)
    styles: List[str] = Field(default_factory=list)


class AnalysisIssue(BaseModel):
    issue: str
    impact: str = ""
    priority: str = "medium"  # high | medium | low


# Request models
class AnalysisRequest(BaseModel):
    url: Optional[str] = None


class SolutionRequest(BaseModel):
    issue: Optional[str] = None


class EmailRequest(BaseModel):
    to: Optional[str] = None
    subject: str = "Website Analysis Report"
    html: str = ""
    site_name: Optional[str] = None
    site_url: Optional[str] = None


class TestEmailRequest(BaseModel):
    email: Optional[str] = None


# Response models
class MainPage(BaseModel):
    url: str
    title: str
    description: str
    h1: str
    screenshot: Optional[str] = None  # data:image/jpeg;base64,...
    viewport: str = "Missing"


class Assets(BaseModel):
    links: int
    images: int
    scripts: int
    styles: int


class ContentSummary(BaseModel):
    word_count: int
    h1_count: int
    h2_count: int
    mobile_optimized: bool


class AnalysisResponse(BaseModel):
    main_page: MainPage
    assets: Assets
    content: ContentSummary
    issues: List[AnalysisIssue]
    ai_analysis: str
    analyzed_at: str
    fallback: bool = False


class SolutionResponse(BaseModel):
    solution: str
    category: str
    issue: str
    fallback: bool = False


class ReportRequest(AnalysisResponse):
    # Optional generated solutions keyed by issue text
    solutions: Optional[dict] = None
