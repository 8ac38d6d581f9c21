"""
Unit tests for record normalization.
"""

from core.normalize import (
    FIELD_LIMITS, MAX_CLEAN_SKILLS, company_for_domain, merge_with_hints, truncate, validate_and_clean,
)
from core.url_analyzer import URLHints
from pipeline.records import JobRecord

URL = "https://example.com/jobs/42"


class TestMergeWithHints:
    """Test backfilling from URL hints."""

    def test_extractor_values_win(self):
        record = JobRecord(title="Staff Engineer", company="Acme")
        hints = URLHints(domain="example.com", title="Engineer", company="Other", location="Remote")
        merged = merge_with_hints(record, hints)
        assert merged.title == "Staff Engineer"
        assert merged.company == "Acme"
        assert merged.location == "Remote"

    def test_blank_fields_are_backfilled(self):
        record = JobRecord(title="   ", job_type="")
        hints = URLHints(domain="example.com", title="Data Analyst", job_type="Contract", experience="Senior")
        merged = merge_with_hints(record, hints)
        assert merged.title == "Data Analyst"
        assert merged.job_type == "Contract"
        assert merged.experience == "Senior"

    def test_company_from_domain_table(self):
        merged = merge_with_hints(JobRecord(title="SDE"), URLHints(domain="www.amazon.jobs"))
        assert merged.company == "Amazon"

    def test_input_not_mutated(self):
        record = JobRecord()
        merge_with_hints(record, URLHints(domain="example.com", title="Designer"))
        assert record.title == ""

    def test_company_for_domain(self):
        assert company_for_domain("jobs.apple.com") == "Apple"
        assert company_for_domain("WWW.Amazon.Jobs") == "Amazon"
        assert company_for_domain("example.com") is None
        assert company_for_domain("") is None


class TestValidateAndClean:
    """Test bounding, deduplication and defaults."""

    def test_defaults(self):
        cleaned = validate_and_clean(JobRecord(title="Engineer"), URL)
        assert cleaned.job_type == "Full-time"
        assert cleaned.experience == "Entry"
        assert cleaned.apply_link == URL
        assert cleaned.skills == []

    def test_existing_apply_link_kept(self):
        cleaned = validate_and_clean(JobRecord(apply_link="https://example.com/apply"), URL)
        assert cleaned.apply_link == "https://example.com/apply"

    def test_whitespace_collapsed(self):
        cleaned = validate_and_clean(JobRecord(title="  Senior\n\n  Engineer\t"), URL)
        assert cleaned.title == "Senior Engineer"

    def test_field_caps(self):
        record = JobRecord(
            title="T" * 150,
            company="C" * 80,
            location="L" * 60,
            description="D" * 3000,
        )
        cleaned = validate_and_clean(record, URL)
        for attr, limit in FIELD_LIMITS.items():
            value = getattr(cleaned, attr)
            assert len(value) == limit
            assert value.endswith("...")

    def test_values_at_limit_untouched(self):
        cleaned = validate_and_clean(JobRecord(title="T" * 100), URL)
        assert cleaned.title == "T" * 100

    def test_skills_cleaned(self):
        skills = ["Python", "python", " AWS ", "X", "A" * 31] + [f"Skill{i}" for i in range(12)]
        cleaned = validate_and_clean(JobRecord(skills=skills), URL)
        assert cleaned.skills[:2] == ["Python", "AWS"]
        assert len(cleaned.skills) == MAX_CLEAN_SKILLS
        assert "X" not in cleaned.skills

    def test_idempotent(self):
        record = JobRecord(title="  Lead  Dev ", description="D" * 2500, skills=["Go", "go"])
        once = validate_and_clean(record, URL)
        assert validate_and_clean(once, URL) == once

    def test_truncate(self):
        assert truncate("abcdef", 10) == "abcdef"
        assert truncate("abcdefghijkl", 10) == "abcdefg..."
