# app/session.py
"""
State of one transcript upload: extraction, summary and their status
messages.

Every upload starts a new cycle. Results are recorded together with the
cycle id they were produced for; results for an older cycle are dropped so a
slow summary for a previous file can never show up next to a new one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from agreement_matcher import MatchOutcome, evaluate_matches
from agreements import AgreementTable
from pdf_utils import looks_like_transcript

logger = logging.getLogger(__name__)

NOT_A_TRANSCRIPT = "Warning: The uploaded document does not appear to be a transcript."


@dataclass
class TranscriptSession:
    cycle: int = 0
    file_name: Optional[str] = None
    file_status: Optional[str] = None
    pdf_status: Optional[str] = None
    extracted_text: Optional[str] = None
    validity_message: Optional[str] = None
    summary_text: Optional[str] = None
    summary_status: Optional[str] = None
    is_summarizing: bool = False
    error: Optional[str] = None

    def _reset(self) -> None:
        self.file_name = None
        self.file_status = None
        self.pdf_status = None
        self.extracted_text = None
        self.validity_message = None
        self.summary_text = None
        self.summary_status = None
        self.is_summarizing = False
        self.error = None

    def _is_current(self, cycle: int) -> bool:
        if cycle != self.cycle:
            logger.info("Discarding result for stale cycle %d (current %d)", cycle, self.cycle)
            return False
        return True

    # --- upload -----------------------------------------------------------

    def begin_cycle(self, file_name: Optional[str] = None) -> int:
        self._reset()
        self.cycle += 1
        self.file_name = file_name
        if file_name:
            self.file_status = f"File '{file_name}' loaded successfully."
        return self.cycle

    def reject_file(self, message: str = "Invalid file type. Please upload a PDF file.") -> None:
        self._reset()
        self.cycle += 1
        self.error = message

    # --- extraction -------------------------------------------------------

    def record_extraction(self, cycle: int, text: str) -> bool:
        if not self._is_current(cycle):
            return False

        text = (text or "").strip()
        if not text:
            self.extracted_text = None
            self.pdf_status = "No text could be extracted from the PDF."
            return True

        self.extracted_text = text
        self.pdf_status = None
        self.validity_message = None if looks_like_transcript(text) else NOT_A_TRANSCRIPT
        return True

    def record_extraction_error(self, cycle: int, message: str) -> bool:
        if not self._is_current(cycle):
            return False
        self.extracted_text = None
        self.validity_message = None
        self.pdf_status = "Error extracting text."
        self.error = (
            "Failed to extract text from the PDF. "
            "The file might be corrupted or password-protected."
        )
        logger.warning("PDF extraction failed for %s: %s", self.file_name, message)
        return True

    # --- summary ----------------------------------------------------------

    def should_summarize(self) -> bool:
        return bool(
            self.extracted_text
            and self.validity_message is None
            and not self.is_summarizing
            and not self.summary_text
        )

    def start_summary(self, cycle: int) -> bool:
        if not self._is_current(cycle):
            return False
        self.is_summarizing = True
        self.summary_status = "Generating summary..."
        self.summary_text = None
        self.error = None
        return True

    def record_summary(self, cycle: int, text: str) -> bool:
        if not self._is_current(cycle):
            return False
        self.is_summarizing = False
        self.summary_text = text
        self.summary_status = "Summary complete!"
        return True

    def record_summary_error(self, cycle: int, message: str) -> bool:
        if not self._is_current(cycle):
            return False
        self.is_summarizing = False
        self.summary_text = None
        self.summary_status = "Error generating summary."
        self.error = "Failed to generate summary. Please try again."
        logger.warning("Summary failed for %s: %s", self.file_name, message)
        return True

    # --- matching ---------------------------------------------------------

    def match(self, table: Optional[AgreementTable]) -> MatchOutcome:
        return evaluate_matches(self.summary_text, table)
