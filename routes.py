import asyncio
import base64
import logging
import traceback
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from playwright.async_api import Error as PlaywrightError

from analyzer import capture_screenshot, extract_page_data, generate_assessment, generate_solution
from config import settings
from core.browser import BrowserAcquirer
from core.diagnostics import build_health_report, run_browser_check
from core.environment import BrowserConfiguration, EnvironmentProber
from core.errors import (
    NavigationError,
    ServiceError,
    ValidationError,
    validate_url,
)
from core.lifecycle import LifecycleGuard
from core.page import PageSessionManager
from core.strategies import build_strategies
from models import (
    AnalysisRequest,
    AnalysisResponse,
    Assets,
    ContentSummary,
    EmailRequest,
    MainPage,
    ReportRequest,
    SolutionRequest,
    SolutionResponse,
    TestEmailRequest,
)
from utils.clients.anthropic import is_configured
from utils.clients.email import build_test_email_html, describe_email_config, send_email
from utils.reporting import generate_docx_report, generate_pdf_report, report_filename

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


# Request-scoped dependencies, overridable in tests via app.dependency_overrides
def get_browser_configuration() -> BrowserConfiguration:
    return BrowserConfiguration.from_settings(settings)


def get_prober(config: BrowserConfiguration = Depends(get_browser_configuration)) -> EnvironmentProber:
    return EnvironmentProber(config)


def get_acquirer(config: BrowserConfiguration = Depends(get_browser_configuration)) -> BrowserAcquirer:
    return BrowserAcquirer(build_strategies(config), launch_timeout=config.launch_timeout)


def get_page_manager(config: BrowserConfiguration = Depends(get_browser_configuration)) -> PageSessionManager:
    return PageSessionManager(
        block_resources=config.block_resources,
        navigation_timeout=config.navigation_timeout,
    )


def _error_response(error: ServiceError, extra: Optional[dict] = None) -> JSONResponse:
    body = error.to_dict()
    if extra:
        body.update(extra)
    if not settings.is_production and error.status_code >= 500:
        body["stack"] = traceback.format_exc()
    return JSONResponse(status_code=error.status_code, content=body)


@router.get("/")
async def root():
    return {
        "service": "Site Analyzer",
        "status": "running",
        "endpoints": {
            "analyze": "/api/analyze (POST)",
            "generate_solution": "/api/generate-solution (POST)",
            "send_email": "/api/send-email (POST)",
            "test_email_config": "/api/test-email-config (GET)",
            "test_email": "/api/test-email (POST)",
            "report_docx": "/api/report/docx (POST)",
            "report_pdf": "/api/report/pdf (POST)",
            "health": "/api/health (GET)",
            "browser_check": "/api/browser-check (GET)",
        },
    }


@router.post("/api/analyze", response_model=AnalysisResponse)
async def analyze_website(
    request: AnalysisRequest,
    prober: EnvironmentProber = Depends(get_prober),
    acquirer: BrowserAcquirer = Depends(get_acquirer),
    page_manager: PageSessionManager = Depends(get_page_manager),
):
    """
    Analyzes a website and returns page data, issues and an AI assessment.

    The browser is released before the AI assessment runs, so a slow model
    call never holds a browser process open.
    """
    try:
        url = validate_url(request.url)
    except ValidationError as e:
        return _error_response(e)

    logger.info(f"🚀 Starting analysis for {url}")
    descriptor = prober.probe()

    try:
        async with LifecycleGuard(acquirer, page_manager) as guard:
            await guard.acquire(descriptor)
            page = await guard.open_page()
            await page_manager.navigate(page, url)
            page_data = await extract_page_data(page)

            try:
                screenshot = await capture_screenshot(page)
            except PlaywrightError as e:
                logger.warning(f"⚠️  Screenshot failed for {url}: {str(e)}")
                screenshot = None
    except NavigationError as e:
        return _error_response(e)
    except ServiceError as e:
        logger.error(f"❌ Analysis of {url} failed: {e.message}")
        return _error_response(e)
    except Exception as e:
        logger.error(f"❌ Unexpected failure analyzing {url}: {str(e)}")
        return _error_response(
            ServiceError(f"Analysis failed: {str(e)}"),
            extra={"error": "Failed to analyze website"},
        )

    assessment = await generate_assessment(url, page_data)

    response = AnalysisResponse(
        main_page=MainPage(
            url=url,
            title=page_data.title,
            description=page_data.description,
            h1=page_data.h1,
            screenshot=(
                f"data:image/jpeg;base64,{base64.b64encode(screenshot).decode('utf-8')}"
                if screenshot
                else None
            ),
            viewport="Present" if page_data.has_viewport else "Missing",
        ),
        assets=Assets(
            links=page_data.link_count,
            images=page_data.image_count,
            scripts=len(page_data.scripts),
            styles=len(page_data.styles),
        ),
        content=ContentSummary(
            word_count=page_data.word_count,
            h1_count=page_data.h1_count,
            h2_count=page_data.h2_count,
            mobile_optimized=page_data.mobile_optimized,
        ),
        issues=assessment.issues,
        ai_analysis=assessment.ai_analysis,
        analyzed_at=datetime.utcnow().isoformat() + "Z",
        fallback=assessment.fallback,
    )
    logger.info(f"✅ Analysis complete for {url} ({len(response.issues)} issues)")
    return response


@router.post("/api/generate-solution", response_model=SolutionResponse)
async def generate_issue_solution(request: SolutionRequest):
    """Generate a fix for one issue; falls back to template text if the AI fails."""
    if not request.issue or not request.issue.strip():
        return _error_response(ValidationError("Issue description is required"))
    return await generate_solution(request.issue.strip())


@router.post("/api/send-email")
async def send_report_email(request: EmailRequest):
    try:
        result = await asyncio.to_thread(send_email, request.to, request.subject, request.html)
    except ServiceError as e:
        return _error_response(e, extra={"success": False})

    site = request.site_name or request.site_url or "your website"
    return {
        "success": True,
        "message": f"Analysis report for {site} has been sent to {result['to']}",
        "message_id": result["message_id"],
    }


@router.get("/api/test-email-config")
async def test_email_config():
    config = describe_email_config()
    logger.info(f"📧 Email configuration: {config}")
    return {"success": True, "config": config}


@router.post("/api/test-email")
async def send_test_email(request: TestEmailRequest):
    try:
        result = await asyncio.to_thread(
            send_email,
            request.email,
            "Site Analyzer Test Email",
            build_test_email_html(),
        )
    except ServiceError as e:
        return _error_response(e, extra={"success": False, "config": describe_email_config()})

    return {
        "success": True,
        "message": f"Test email sent to {result['to']}",
        "message_id": result["message_id"],
    }


@router.post("/api/report/docx")
async def download_docx_report(request: ReportRequest):
    buffer = generate_docx_report(request.model_dump())
    filename = report_filename(request.main_page.url, "docx")
    return StreamingResponse(
        buffer,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/api/report/pdf")
async def download_pdf_report(request: ReportRequest):
    buffer = generate_pdf_report(request.model_dump())
    filename = report_filename(request.main_page.url, "pdf")
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/api/health")
async def health_check(
    prober: EnvironmentProber = Depends(get_prober),
    acquirer: BrowserAcquirer = Depends(get_acquirer),
):
    report = build_health_report(prober, acquirer, llm_configured=is_configured())
    report["environment"] = settings.ENVIRONMENT
    status_code = 503 if report["status"] == "error" else 200
    return JSONResponse(status_code=status_code, content=report)


@router.get("/api/browser-check")
async def browser_check(
    prober: EnvironmentProber = Depends(get_prober),
    acquirer: BrowserAcquirer = Depends(get_acquirer),
    page_manager: PageSessionManager = Depends(get_page_manager),
):
    return await run_browser_check(prober, acquirer, page_manager)
