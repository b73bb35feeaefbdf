import logging

from fastapi import FastAPI, UploadFile, File, HTTPException, Response

from . import config
from .aggregate import format_kpis, top_products
from .errors import SalesPipelineError
from .export import sha256_hex, to_csv_bytes, to_normalized_csv
from .models import CleaningReport, PipelineResponse, HealthResponse
from .normalize import decode_csv_bytes
from .pipeline import PipelineResult, run_pipeline
from .rules import EXPORT_FILENAME

config.setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="sales-cleaner",
    description="Sales CSV cleaning, deduplication and aggregation",
    version="0.1.0",
)


async def _run_upload(file: UploadFile) -> PipelineResult:
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    text, encoding = decode_csv_bytes(raw)
    logger.debug("Decoded %s: %s", file.filename, encoding)
    try:
        return run_pipeline(text)
    except SalesPipelineError as exc:
        logger.warning("Rejected upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=422, detail=str(exc))


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/pipeline", response_model=PipelineResponse)
async def pipeline(file: UploadFile = File(...), include_rejections: bool = False):
    result = await _run_upload(file)

    report = result.report
    if not include_rejections:
        report = CleaningReport(rows_before=report.rows_before, rows_after=report.rows_after)

    return PipelineResponse(
        report=report,
        raw_preview=result.raw[:config.PREVIEW_ROWS],
        clean_preview=[r.as_row() for r in result.clean[:config.PREVIEW_ROWS]],
        summary=result.summary,
        top_products=top_products(result.summary, config.TOP_PRODUCTS),
        kpis=format_kpis(result.summary),
        clean_csv=to_normalized_csv(result.clean),
    )


@app.post("/export")
async def export(file: UploadFile = File(...)):
    result = await _run_upload(file)
    data = to_csv_bytes(result.clean)
    return Response(
        content=data,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"',
            "X-Content-SHA256": sha256_hex(data),
        },
    )
