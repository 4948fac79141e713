from interview_assistant.models.schemas import CandidateInfo, ExtractedFields
from interview_assistant.services.extractor import (
    extract_email,
    extract_fields,
    extract_name,
    extract_phone,
    validate_fields,
)

RESUME = """John Smith
Software Engineer
john.smith@Gmail.COM
(555) 123-4567

Experience
Built things with React and Node.
"""


def test_extract_fields_from_typical_resume():
    """Name, email and phone all come out of a conventional header"""
    fields = extract_fields(RESUME)
    assert fields.name == "John Smith"
    assert fields.email == "john.smith@gmail.com"
    assert fields.phone == "(555) 123-4567"


def test_email_found_anywhere_and_lowercased():
    text = "Lots of prose here.\nReach me at First.Last+x@Mail.Example.ORG or later."
    assert extract_email("Contact: ABC_def@Sub.Domain.io today") == "abc_def@sub.domain.io"
    assert extract_email(text) is not None
    assert extract_email(text).endswith("@mail.example.org")


def test_email_missing():
    assert extract_email("no address in here") is None


def test_phone_requires_ten_to_fifteen_digits():
    """Short digit runs such as years are skipped"""
    assert extract_phone("Graduated 2019, call 555-1234") is None
    assert extract_phone("Phone: +91 98765 43210") == "+91 98765 43210"
    assert extract_phone("Tel 555.123.4567 ext") == "555.123.4567"


def test_phone_is_returned_as_typed():
    assert extract_phone("call me: +1-555-123-4567") == "+1-555-123-4567"


def test_name_first_qualifying_line_wins():
    text = "Curriculum Vitae\n\nMary-Jane O'Neil\nData Engineer"
    assert extract_name(text) == "Mary-Jane O'Neil"


def test_name_rejects_non_name_lines():
    text = "\n".join([
        "RESUME",
        "jane doe",
        "Jane Doe 12345",
        "Jane@Doe Co",
        "Senior Staff Principal Software Engineer",
        "Jane Doe",
    ])
    # the only valid line is the sixth non-blank line, past the scan window
    assert extract_name(text) is None


def test_name_two_capitalised_words_on_first_line():
    assert extract_name("Ada Lovelace\nMathematician and writer") == "Ada Lovelace"


def test_name_single_word_rejected():
    assert extract_name("Madonna\nSinger") is None


def test_extract_fields_never_raises_on_empty_input():
    assert extract_fields("") == ExtractedFields()
    assert extract_fields("   \n\n ") == ExtractedFields()


def test_validate_missing_fields_always_in_fixed_order():
    result = validate_fields(ExtractedFields(email="a@b.co"))
    assert result.is_valid is False
    assert result.missing_fields == ["name", "phone"]

    result = validate_fields(ExtractedFields(phone="5551234567", name="  "))
    assert result.missing_fields == ["name", "email"]

    result = validate_fields(ExtractedFields())
    assert result.missing_fields == ["name", "email", "phone"]


def test_validate_accepts_candidate_info():
    info = CandidateInfo(name="Jane Doe", email="jane@doe.dev", phone="5551234567")
    result = validate_fields(info)
    assert result.is_valid is True
    assert result.missing_fields == []
