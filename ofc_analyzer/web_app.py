import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .checko_client import CheckoClient, check_connection
from .config import AppConfig, load_config
from .financials import (
    CheckoReportSource,
    SampleReportSource,
    analyze_companies,
    estimate_requests,
    parse_inns,
    resolve_periods,
)
from .errors import QuotaExceededError
from .periods import Period
from .quota import RequestQuota
from .ratio_calculator import METRIC_SECTIONS
from .run_logger import log_step, summarize_results


logger = logging.getLogger(__name__)


class PeriodModel(BaseModel):
    year: int
    quarter: Optional[int] = None


class EstimateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inns: List[str] = Field(default_factory=list)
    year: Optional[int] = None
    quarter: Optional[int] = None
    previous_year: Optional[int] = Field(default=None, alias="previousYear")
    periods: Optional[List[PeriodModel]] = None
    include_previous_year: bool = Field(default=True, alias="includePreviousYear")


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inns: List[str] = Field(default_factory=list)
    year: Optional[int] = None
    quarter: Optional[int] = None
    previous_year: Optional[int] = Field(default=None, alias="previousYear")
    periods: Optional[List[PeriodModel]] = None
    sections: Optional[List[str]] = None
    force_mock: bool = Field(default=False, alias="forceMock")


def _default_source_factory(config: AppConfig) -> Callable[[bool], Any]:
    def factory(mock: bool):
        if mock:
            return SampleReportSource(config.sample_data_path)
        client = CheckoClient(
            api_key=config.checko_api_key,
            base_url=config.checko_base_url,
            timeout=config.request_timeout_seconds,
            max_retries=config.request_max_retries,
        )
        return CheckoReportSource(client)

    return factory


def _resolve_request_periods(
    year: Optional[int],
    quarter: Optional[int],
    previous_year: Optional[int],
    periods: Optional[List[PeriodModel]],
) -> Tuple[List[Period], Period]:
    try:
        return resolve_periods(
            year=year,
            quarter=quarter,
            previous_year=previous_year,
            periods=[p.model_dump() for p in periods] if periods else None,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def create_app(
    source_factory: Optional[Callable[[bool], Any]] = None,
    quota: Optional[RequestQuota] = None,
    connection_probe: Optional[Callable[[str], Tuple[bool, Optional[str]]]] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    config = config or load_config()
    app = FastAPI(title="OFC Analyzer")

    if source_factory is None:
        source_factory = _default_source_factory(config)
    if quota is None:
        quota = RequestQuota(config.daily_request_limit)
    if connection_probe is None:
        def connection_probe(base_url: str) -> Tuple[bool, Optional[str]]:
            return check_connection(base_url, timeout=config.request_timeout_seconds)

    run_log_dir = Path(config.run_log_dir) if config.run_log_dir else None

    @app.get("/api/health")
    def health():
        return {"status": "ok", "mock_mode": config.mock_mode}

    @app.get("/api/quota")
    def quota_status():
        return quota.snapshot()

    @app.post("/api/estimate")
    def estimate(payload: EstimateRequest):
        inns = parse_inns(payload.inns)
        if not inns:
            raise HTTPException(status_code=400, detail="At least one INN is required")
        if payload.year is None and not payload.periods:
            required = len(inns) * (2 if payload.include_previous_year else 1)
        else:
            requested, base = _resolve_request_periods(
                payload.year, payload.quarter, payload.previous_year, payload.periods
            )
            required = estimate_requests(
                inns, requested, base if payload.include_previous_year else None
            )
        snapshot = quota.snapshot()
        return {
            "required": required,
            "used": snapshot["used"],
            "limit": snapshot["limit"],
            "remaining": snapshot["remaining"],
            "fits": required <= snapshot["remaining"],
        }

    @app.get("/api/check-connection")
    def check_provider_connection():
        host = config.checko_base_url
        ok, error = connection_probe(host)
        if not ok:
            return JSONResponse({"ok": False, "host": host, "error": error}, status_code=503)
        return {"ok": True, "host": host}

    @app.post("/api/analyze")
    def analyze(payload: AnalyzeRequest):
        inns = parse_inns(payload.inns)
        if not inns:
            raise HTTPException(status_code=400, detail="At least one INN is required")
        if payload.year is None and not payload.periods:
            raise HTTPException(status_code=400, detail="A reporting year or periods are required")

        sections = payload.sections or list(METRIC_SECTIONS)
        unknown = sorted(set(sections).difference(METRIC_SECTIONS))
        if unknown:
            raise HTTPException(
                status_code=400, detail=f"Unknown metric sections: {', '.join(unknown)}"
            )

        requested, base = _resolve_request_periods(
            payload.year, payload.quarter, payload.previous_year, payload.periods
        )

        mock = payload.force_mock or config.mock_mode
        if not mock:
            try:
                quota.consume(estimate_requests(inns, requested, base))
            except QuotaExceededError as exc:
                raise HTTPException(status_code=429, detail=str(exc))

        source = source_factory(mock)
        results = analyze_companies(
            inns,
            requested,
            source,
            base=base,
            sections=sections,
            max_workers=config.fetch_max_concurrency,
        )

        snapshot = quota.snapshot()
        meta: Dict[str, Any] = {
            "inns": inns,
            "periods": [p.label for p in requested],
            "base": base.label if base is not None else None,
            "sections": sections,
            "source": "sample data" if mock else "Checko API",
            "mock_mode": mock,
            "used": snapshot["used"],
            "limit": snapshot["limit"],
            "remaining": snapshot["remaining"],
        }
        log_step(run_log_dir, "analyze", {"meta": meta, "results": summarize_results(results)})
        logger.info("Analyzed %s INN(s) for %s", len(inns), ", ".join(meta["periods"]))
        return JSONResponse({"meta": meta, "results": results})

    return app


app = create_app()
