"""
Health and browser diagnostics for Site Analyzer.

build_health_report() is side-effect free: it only probes the environment and
resolves strategy locators. run_browser_check() performs a real launch and an
about:blank page test through a LifecycleGuard.
"""

import os
import platform
import sys
import logging
from datetime import datetime
from importlib import metadata
from typing import Dict, List

import psutil

from core.browser import BrowserAcquirer
from core.environment import EnvironmentDescriptor, EnvironmentProber
from core.errors import ServiceError
from core.lifecycle import LifecycleGuard
from core.page import PageSessionManager

logger = logging.getLogger(__name__)

OK = "ok"
WARNING = "warning"
ERROR = "error"

TEMP_LISTING_LIMIT = 50


def component(status: str, detail: str, **extra) -> Dict:
    body = {"status": status, "detail": detail}
    body.update(extra)
    return body


def browser_component(resolved: List[Dict]) -> Dict:
    found = [r for r in resolved if r["executable_path"]]
    if found:
        return component(
            OK,
            f"Strategy '{found[0]['strategy_id']}' resolves {found[0]['executable_path']}",
            strategies=resolved,
        )
    return component(ERROR, "No acquisition strategy resolves a browser executable", strategies=resolved)


def environment_component(descriptor: EnvironmentDescriptor) -> Dict:
    problems = []
    if not descriptor.writable_temp_root:
        problems.append(f"temp root {descriptor.temp_root} is not writable")
    if descriptor.missing_shared_libraries:
        problems.append("missing shared libraries: " + ", ".join(descriptor.missing_shared_libraries))
    problems.extend(descriptor.probe_errors)

    if problems:
        return component(WARNING, "; ".join(problems), descriptor=descriptor.to_dict())
    return component(OK, "Environment looks healthy", descriptor=descriptor.to_dict())


def overall_status(components: Dict[str, Dict]) -> str:
    statuses = {c["status"] for c in components.values()}
    if ERROR in statuses:
        return ERROR
    if WARNING in statuses:
        return "degraded"
    return OK


def build_health_report(
    prober: EnvironmentProber,
    acquirer: BrowserAcquirer,
    llm_configured: bool,
) -> Dict:
    """
    Component-level health without launching anything.

    Returns:
        Dict with 'status' ("ok" | "degraded" | "error"), 'components' and 'timestamp'
    """
    descriptor = prober.probe()
    components = {
        "api": component(OK, "API is running"),
        "llm": (
            component(OK, "ANTHROPIC_API_KEY configured")
            if llm_configured
            else component(WARNING, "ANTHROPIC_API_KEY missing; rule-based fallbacks will be used")
        ),
        "browser": browser_component(acquirer.resolve(descriptor)),
        "environment": environment_component(descriptor),
    }
    return {
        "status": overall_status(components),
        "components": components,
        "timestamp": datetime.utcnow().isoformat(),
    }


def list_temp_dir(temp_root: str) -> Dict:
    try:
        entries = sorted(os.listdir(temp_root))
    except OSError as e:
        return {"path": temp_root, "error": str(e)}
    return {
        "path": temp_root,
        "entries": entries[:TEMP_LISTING_LIMIT],
        "truncated": len(entries) > TEMP_LISTING_LIMIT,
    }


def memory_usage() -> Dict:
    try:
        process = psutil.Process()
        info = process.memory_info()
        system = psutil.virtual_memory()
    except psutil.Error as e:
        return {"error": str(e)}
    return {
        "rss_mb": round(info.rss / (1024 * 1024), 1),
        "vms_mb": round(info.vms / (1024 * 1024), 1),
        "system_total_mb": round(system.total / (1024 * 1024), 1),
        "system_available_mb": round(system.available / (1024 * 1024), 1),
        "system_percent": system.percent,
    }


def dependency_versions() -> Dict:
    versions = {}
    for package in ("playwright", "anthropic", "fastapi"):
        try:
            versions[package] = metadata.version(package)
        except metadata.PackageNotFoundError:
            versions[package] = None
    return versions


async def run_browser_check(
    prober: EnvironmentProber,
    acquirer: BrowserAcquirer,
    page_manager: PageSessionManager,
) -> Dict:
    """
    Full browser diagnostics, including a real launch.

    Never raises for browser failures; they are reported in the payload.
    """
    descriptor = prober.probe()
    diagnostics = {
        "timestamp": datetime.utcnow().isoformat(),
        "environment": {
            "platform": descriptor.platform,
            "architecture": descriptor.architecture,
            "python": platform.python_version(),
            "executable": sys.executable,
            "serverless": descriptor.is_serverless_host,
            "descriptor": descriptor.to_dict(),
        },
        "browser": {
            "strategies": acquirer.resolve(descriptor),
            "status": "unknown",
        },
        "filesystem": {"temp_dir": list_temp_dir(descriptor.temp_root)},
        "memory_usage": memory_usage(),
        "dependencies": dependency_versions(),
    }

    browser = diagnostics["browser"]
    logger.info("🔍 Running browser launch check...")
    async with LifecycleGuard(acquirer, page_manager) as guard:
        try:
            session = await guard.acquire(descriptor)
        except ServiceError as e:
            browser["status"] = "error"
            browser["error"] = e.to_dict()
            return diagnostics

        browser["status"] = "success"
        browser["strategy_id"] = session.strategy_id
        browser["version"] = await session.version()

        try:
            page = await guard.open_page()
            await page.goto("about:blank")
            ready_state = await page.evaluate("() => document.readyState")
            browser["page"] = {"created": True, "working": ready_state == "complete"}
        except Exception as e:
            logger.warning(f"⚠️  Browser check page test failed: {str(e)}")
            browser["page"] = {"created": guard.page is not None, "error": str(e)}

    return diagnostics
