from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response

from .config import get_settings
from .errors import StandardizationError, StatementReadError
from .export import to_csv_text
from .logging_setup import configure_logging
from .models import HealthResponse, StandardizationResult, StandardizeResponse
from .standardize import standardize_upload

configure_logging(get_settings().log_level)

app = FastAPI(
    title="statement-normalizer",
    description="Heuristic standardization of bank credit-card statement CSVs",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


async def _standardize(file: UploadFile) -> StandardizationResult:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    try:
        return await standardize_upload(file, get_settings())
    except StatementReadError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StandardizationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post("/standardize", response_model=StandardizeResponse)
async def standardize(file: UploadFile = File(...)):
    result = await _standardize(file)
    return {"filename": result.filename, "count": len(result.rows), "rows": result.rows}


@app.post("/standardize/csv")
async def standardize_csv(file: UploadFile = File(...)):
    result = await _standardize(file)
    return Response(
        content=to_csv_text(result),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
