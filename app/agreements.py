# app/agreements.py
"""
Transfer agreement reference table.

The table is a flat list of records, one per (sending course, receiving
institution) pair:

    Id, SndrInstitutionName, SndrSubjectCode, SndrCourseNumber,
    SndrCourseTitle, SndrCourseCreditHours, RcvrInstitutionName,
    Detail, Condition

It is loaded once and never modified. Loading never raises: any problem is
reported as a "failed" table so the UI can tell "no data" apart from
"no matches".
"""
from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

AGREEMENT_COLUMNS = [
    "Id",
    "SndrInstitutionName",
    "SndrSubjectCode",
    "SndrCourseNumber",
    "SndrCourseTitle",
    "SndrCourseCreditHours",
    "RcvrInstitutionName",
    "Detail",
    "Condition",
]
REQUIRED_COLUMNS = ["SndrSubjectCode", "SndrCourseNumber"]


class TableStatus(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class AgreementTable:
    status: TableStatus
    frame: Optional[pd.DataFrame] = None
    source: str = ""
    error: Optional[str] = None

    @classmethod
    def pending(cls, source: str = "") -> "AgreementTable":
        return cls(TableStatus.LOADING, source=source)

    @classmethod
    def failed(cls, source: str, error: str) -> "AgreementTable":
        logger.warning("Agreement table %s unavailable: %s", source, error)
        return cls(TableStatus.FAILED, source=source, error=error)

    @property
    def is_loaded(self) -> bool:
        return self.status is TableStatus.LOADED and self.frame is not None

    def __len__(self) -> int:
        return 0 if self.frame is None else len(self.frame)


# ===============================
# Reading helpers
# ===============================

def _read_csv_with_fallbacks(file_obj_or_path) -> pd.DataFrame:
    """
    Try reading CSV with UTF-8, then cp1252, then latin1 encodings.
    latin1 decodes any byte sequence, so it goes last.
    Works for both file paths and file-like objects (Streamlit uploads).
    """
    last_err: Optional[Exception] = None
    for enc in ("utf-8", "cp1252", "latin1"):
        try:
            if hasattr(file_obj_or_path, "seek"):
                file_obj_or_path.seek(0)
            return pd.read_csv(file_obj_or_path, encoding=enc, dtype=str, keep_default_na=False)
        except UnicodeDecodeError as e:
            last_err = e
            continue
    raise last_err


def _read_excel(source) -> pd.DataFrame:
    """
    Read the first sheet as text. Any failure to read the workbook (bad zip,
    broken XML, not a workbook at all) comes back as ValueError.
    """
    try:
        return pd.read_excel(source, dtype=str)
    except Exception as e:
        raise ValueError(f"could not read Excel file: {e}") from e


def records_to_frame(records: List[dict]) -> pd.DataFrame:
    """
    Build the agreement frame from a list of flat records.

    dtype=object keeps course numbers exactly as given (101 stays 101, not
    101.0 when some rows lack a value).
    """
    df = pd.DataFrame(records, dtype=object)
    for col in AGREEMENT_COLUMNS:
        if col not in df.columns:
            df[col] = None
    extra = [c for c in df.columns if c not in AGREEMENT_COLUMNS]
    return df[AGREEMENT_COLUMNS + extra]


def _read_json_records(raw: Union[str, bytes]) -> pd.DataFrame:
    data: Any = json.loads(raw)
    if isinstance(data, dict):
        # {"agreements": [...]} wrapper
        data = next((v for v in data.values() if isinstance(v, list)), None)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of agreement records")
    return records_to_frame([r for r in data if isinstance(r, dict)])


def _check_columns(df: pd.DataFrame) -> Optional[str]:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns or (len(df) and df[c].isna().all())]
    if missing:
        return f"missing required column(s): {', '.join(missing)}"
    return None


def _finish(df: pd.DataFrame, source: str) -> AgreementTable:
    problem = _check_columns(df)
    if problem:
        return AgreementTable.failed(source, problem)
    logger.info("Loaded %d transfer agreements from %s", len(df), source)
    return AgreementTable(TableStatus.LOADED, frame=df.reset_index(drop=True), source=source)


# ===============================
# Public loaders
# ===============================

def load_agreements(path: Union[str, Path]) -> AgreementTable:
    """
    Load the agreement table from a .json, .csv or .xlsx file.
    """
    path = Path(path)
    source = str(path)
    if not path.exists():
        return AgreementTable.failed(source, "file not found")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            df = _read_json_records(path.read_bytes())
        elif suffix == ".csv":
            df = records_to_frame(_read_csv_with_fallbacks(path).to_dict("records"))
        elif suffix == ".xlsx":
            df = records_to_frame(_read_excel(path).to_dict("records"))
        else:
            return AgreementTable.failed(source, f"unsupported file type '{suffix}'")
    except (OSError, ValueError, UnicodeDecodeError) as e:
        return AgreementTable.failed(source, str(e))

    return _finish(df, source)


def load_agreements_from_upload(uploaded_file) -> AgreementTable:
    """
    Same as load_agreements, for a Streamlit UploadedFile (or any object with
    .name and .getvalue()).
    """
    name = getattr(uploaded_file, "name", "upload")
    lower = name.lower()
    try:
        raw = uploaded_file.getvalue()
        if lower.endswith(".json"):
            df = _read_json_records(raw)
        elif lower.endswith(".csv"):
            df = records_to_frame(_read_csv_with_fallbacks(io.BytesIO(raw)).to_dict("records"))
        elif lower.endswith(".xlsx"):
            # Excel: encoding is handled by openpyxl
            df = records_to_frame(_read_excel(io.BytesIO(raw)).to_dict("records"))
        else:
            return AgreementTable.failed(name, "unsupported file type")
    except (OSError, ValueError, UnicodeDecodeError) as e:
        return AgreementTable.failed(name, str(e))

    return _finish(df, name)
