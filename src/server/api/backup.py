from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlmodel import Session

from src.server.db.session import get_session
from src.server.schemas.backup import BackupIn, ImportMode, ImportPreviewOut, ImportResultOut
from src.services.backup_service import ImportFailed, export_backup, import_backup, preview_import
from src.services.storage import backup_filename

router = APIRouter(prefix="/backup", tags=["backup"])


# ==============================
# EXPORT
# ==============================

@router.get("/export", summary="Exportera all data som JSON")
def export_all(session: Session = Depends(get_session)):
    data = export_backup(session=session)
    return JSONResponse(
        content=data,
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


# ==============================
# IMPORT
# ==============================

@router.post("/preview", response_model=ImportPreviewOut, summary="Jämför backup med befintlig data")
def preview(payload: BackupIn, session: Session = Depends(get_session)):
    return preview_import(payload=payload, session=session)


@router.post("/import", response_model=ImportResultOut, summary="Importera backup (merge eller överskrivning)")
def import_all(
    payload: BackupIn,
    mode: ImportMode = Query(ImportMode.merge),
    session: Session = Depends(get_session),
):
    try:
        return import_backup(payload=payload, mode=mode, session=session)
    except ImportFailed as e:
        raise HTTPException(status_code=500, detail=e.message)
