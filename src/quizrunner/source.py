import logging
import os
from typing import Any, Dict, List

import pandas as pd
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from .errors import EmptyDataset, SourceUnavailable
from .models import QuestionRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("q", "a", "options")
CSV_OPTION_SEPARATOR = "|"


class QuestionSource:
    """Loads question records from a JSON or CSV file.

    JSON files hold an array of ``{"q", "a", "options", "explanation"}``
    objects. CSV files use the same column names with the options joined by
    ``|`` in a single cell.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[QuestionRecord]:
        if not os.path.isfile(self.path):
            logger.error(f"Question file {self.path} not found.")
            raise SourceUnavailable(f"Question file {self.path} not found.")

        df = self._read_frame()
        if len(df.index) == 0:
            logger.error(f"Question file {self.path} contains no questions.")
            raise EmptyDataset(f"Question file {self.path} contains no questions.")

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise SourceUnavailable(
                f"Question file {self.path} is missing fields: {', '.join(missing)}"
            )
        if "explanation" not in df.columns:
            df["explanation"] = ""

        records = [self._to_record(row) for row in df.to_dict("records")]
        logger.info(f"Loaded {len(records)} questions from {self.path}")
        return records

    async def load_async(self) -> List[QuestionRecord]:
        return await run_in_threadpool(self.load)

    def _read_frame(self) -> pd.DataFrame:
        ext = os.path.splitext(self.path)[1].lower()
        try:
            if ext == ".json":
                return pd.read_json(
                    self.path,
                    orient="records",
                    dtype=False,
                    convert_dates=False,
                    encoding="utf-8",
                )
            if ext == ".csv":
                df = pd.read_csv(
                    self.path, encoding="utf-8", dtype=str, keep_default_na=False
                )
                if "options" in df.columns:
                    df["options"] = df["options"].map(
                        lambda cell: [o.strip() for o in cell.split(CSV_OPTION_SEPARATOR)]
                    )
                return df
        except pd.errors.EmptyDataError as e:
            raise EmptyDataset(f"Question file {self.path} is empty.") from e
        except (ValueError, OSError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise SourceUnavailable(f"Could not read question file {self.path}: {e}") from e
        raise SourceUnavailable(f"Unsupported question file format: {self.path}")

    def _to_record(self, row: Dict[str, Any]) -> QuestionRecord:
        explanation = row.get("explanation")
        if explanation is None or (isinstance(explanation, float) and pd.isna(explanation)):
            # pandas fills absent keys with NaN
            row["explanation"] = ""
        try:
            return QuestionRecord.model_validate(row)
        except ValidationError as e:
            raise SourceUnavailable(
                f"Malformed question in {self.path}: {row.get('q')!r}"
            ) from e
