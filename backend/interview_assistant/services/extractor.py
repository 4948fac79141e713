import re
from typing import Union

from interview_assistant.models.schemas import CandidateInfo, ExtractedFields, ValidationResult

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9_-]+")
PHONE_PATTERN = re.compile(r"(\+?\d{1,3}[-.\s]?)?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}")
NAME_CHARS_PATTERN = re.compile(r"[A-Za-z\s'-]+")
DIGIT_RUN_PATTERN = re.compile(r"\d{4,}")

REQUIRED_FIELDS = ("name", "email", "phone")
NAME_SCAN_LINES = 5


def extract_email(text: str):
    match = EMAIL_PATTERN.search(text)
    return match.group(0).lower() if match else None


def extract_phone(text: str):
    """First phone-shaped run with 10-15 digits, kept as typed."""
    for match in PHONE_PATTERN.finditer(text):
        candidate = match.group(0)
        digits = re.sub(r"\D", "", candidate)
        if 10 <= len(digits) <= 15:
            return candidate.strip()
    return None


def _looks_like_name(line: str) -> bool:
    lowered = line.lower()
    if len(line) >= 50 or "@" in line or DIGIT_RUN_PATTERN.search(line):
        return False
    if "resume" in lowered or "curriculum" in lowered:
        return False
    if not NAME_CHARS_PATTERN.fullmatch(line):
        return False

    words = line.split()
    if not 2 <= len(words) <= 4:
        return False
    return all(word[0] == word[0].upper() for word in words)


def extract_name(text: str):
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:NAME_SCAN_LINES]:
        if _looks_like_name(line):
            return line
    return None


def extract_fields(text: str) -> ExtractedFields:
    """Best-guess contact fields from resume text. Never raises."""
    if not text:
        return ExtractedFields()
    return ExtractedFields(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone(text),
    )


def validate_fields(info: Union[ExtractedFields, CandidateInfo]) -> ValidationResult:
    missing = [
        field for field in REQUIRED_FIELDS
        if not (getattr(info, field, None) or "").strip()
    ]
    return ValidationResult(is_valid=not missing, missing_fields=missing)
