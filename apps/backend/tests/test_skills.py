"""
Unit tests for skill extraction.
"""

import pytest
from core.skills import MAX_SKILLS, SKILL_VOCABULARY, SkillExtractor, dedupe_skills, skill_extractor


class TestSkillExtractor:
    """Test dictionary and cue-phrase skill mining."""

    def test_experience_in_list(self):
        text = "Looking for a developer with experience in React, Node.js, and MongoDB"
        assert set(skill_extractor.extract(text)) == {"React", "Node.js", "MongoDB"}
        assert len(skill_extractor.extract(text)) == 3

    def test_dictionary_hits_come_first(self):
        text = "Technologies: Kafka, Airflow and Docker."
        skills = skill_extractor.extract(text)
        assert skills[0] == "Docker"
        assert skills[1:] == ["Kafka", "Airflow"]

    def test_lowercase_captures_are_dropped(self):
        skills = skill_extractor.extract("Technologies: Kafka, Airflow and dbt.")
        assert skills == ["Kafka", "Airflow"]

    def test_capitalized_experience_cue(self):
        assert skill_extractor.extract("Strong Terraform experience required.") == ["Terraform"]
        assert skill_extractor.extract("Solid Snowplow experience is a plus") == ["Snowplow"]

    def test_prose_after_cue_is_ignored(self):
        text = "Candidates with experience with the ability to work independently across teams."
        assert skill_extractor.extract(text) == []

    def test_common_words_need_exact_case(self):
        assert skill_extractor.extract("We go to great lengths and have less overhead") == []
        assert skill_extractor.extract("Backend services are written in Go") == ["Go"]

    def test_whole_token_matching(self):
        skills = skill_extractor.extract("Frontend work in JavaScript only")
        assert "JavaScript" in skills
        assert "Java" not in skills

    def test_symbols_in_terms(self):
        skills = skill_extractor.extract("Build services in C++ and C#, deploy with CI/CD.")
        assert {"C++", "C#", "CI/CD"} <= set(skills)

    def test_case_insensitive_dedup(self):
        skills = skill_extractor.extract("Required: Python, python, PYTHON")
        assert [s.lower() for s in skills].count("python") == 1

    def test_capped_at_fifteen(self):
        terms = SKILL_VOCABULARY['databases'] + SKILL_VOCABULARY['cloud']
        skills = skill_extractor.extract("We use " + ", ".join(terms) + ".")
        assert len(skills) == MAX_SKILLS

    def test_single_letter_terms_are_dropped(self):
        skills = skill_extractor.extract("Statistical modelling in R and Python.")
        assert skills == ["Python"]
        assert all(2 <= len(skill) <= 30 for skill in skills)

    @pytest.mark.parametrize("text", ["", None, "   "])
    def test_empty_input(self, text):
        assert skill_extractor.extract(text) == []

    def test_skill_lengths_bounded(self):
        text = (
            "Required: Python, A, Kubernetes, "
            "Extremely Long Made Up Framework Name That Goes On Forever"
        )
        for skill in skill_extractor.extract(text):
            assert 2 <= len(skill) <= 30

    def test_custom_vocabulary(self):
        extractor = SkillExtractor(vocabulary={'data': ['Spark', 'Flink']})
        assert extractor.dictionary_skills("Streaming with Flink and spark") == ["Spark", "Flink"]


class TestDedupeSkills:
    """Test case-insensitive deduplication."""

    def test_keeps_first_spelling(self):
        assert dedupe_skills(["AWS", "aws", " Aws ", "Azure"]) == ["AWS", "Azure"]

    def test_drops_blank(self):
        assert dedupe_skills(["", "  ", "Go"]) == ["Go"]
