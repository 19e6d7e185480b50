"""Tests for the knowledge base builder."""
from types import MappingProxyType

import pytest

from knowledge_base import (
    INTERESTS_TEXT,
    TOPICS,
    KnowledgeBaseHolder,
    build_knowledge_base,
)


class TestBuildKnowledgeBase:
    def test_covers_every_topic(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert set(kb) == set(TOPICS)
        assert len(TOPICS) == 10

    def test_is_read_only(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert isinstance(kb, MappingProxyType)
        with pytest.raises(TypeError):
            kb["skills"] = "changed"

    def test_same_input_same_output(self, sample_snapshot):
        assert dict(build_knowledge_base(sample_snapshot)) == dict(build_knowledge_base(sample_snapshot))

    def test_skills_format(self):
        kb = build_knowledge_base({"skills": [{"name": "Go", "level": 90}, {"name": "Rust", "level": 80}]})
        assert kb["skills"] == "Top skills: Go (90%), Rust (80%)."

    def test_skills_capped_at_eight(self):
        skills = [{"name": f"S{i}", "level": i} for i in range(12)]
        kb = build_knowledge_base({"skills": skills})
        assert "S7 (7%)" in kb["skills"]
        assert "S8" not in kb["skills"]

    def test_experience_joined(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["experience"] == "Engineer at Acme (2020-2023); Lead at Globex (2023-now)"

    def test_projects_capped_at_six(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["projects"] == "Projects: Project 1; Project 2; Project 3; Project 4; Project 5; Project 6."

    def test_education_missing_year_is_blank(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["education"] == "BSc CS — Uni A (2019); MSc AI — Uni B ()"

    def test_contact_with_email_and_phone(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["contact"] == "Contact: ada@example.com | +1 555 0100. Location: Porto"

    def test_contact_phone_only_uses_hero_location(self):
        kb = build_knowledge_base({"contact": {"phone": "123"}, "hero": {"location": "Lisbon"}})
        assert kb["contact"] == "Contact: 123. Location: Lisbon"

    def test_contact_location_defaults_to_na(self):
        kb = build_knowledge_base({"contact": {"email": "a@b.c"}})
        assert kb["contact"] == "Contact: a@b.c. Location: N/A"

    def test_location_prefers_contact(self, sample_snapshot):
        assert build_knowledge_base(sample_snapshot)["location"] == "Porto"

    def test_location_falls_back_to_hero(self):
        assert build_knowledge_base({"hero": {"location": "Lisbon"}})["location"] == "Lisbon"

    def test_technologies_lists_all_skills(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["technologies"] == "Python, Go, Rust, SQL, Docker"

    def test_availability_uses_contact_email(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["availability"] == "Reach out via ada@example.com for opportunities."

    def test_strengths_first_four(self, sample_snapshot):
        kb = build_knowledge_base(sample_snapshot)
        assert kb["strengths"] == "Strengths include Python, Go, Rust, SQL."

    def test_interests_is_static(self, sample_snapshot, empty_snapshot):
        assert build_knowledge_base(sample_snapshot)["interests"] == INTERESTS_TEXT
        assert build_knowledge_base(empty_snapshot)["interests"] == INTERESTS_TEXT


class TestFallbacks:
    @pytest.mark.parametrize("snapshot", [None, {}, {"skills": None, "hero": "oops"}])
    def test_missing_data_never_raises(self, snapshot):
        kb = build_knowledge_base(snapshot)
        assert set(kb) == set(TOPICS)
        assert all(kb[topic] for topic in TOPICS)

    def test_placeholders(self, empty_snapshot):
        kb = build_knowledge_base(empty_snapshot)
        assert kb["skills"] == "Skills information is not available."
        assert kb["experience"] == "Experience information is not available."
        assert kb["projects"] == "Project information is not available."
        assert kb["education"] == "Education information is not available."
        assert kb["contact"] == "Contact information is not available."
        assert kb["location"] == "Location not set."
        assert kb["technologies"] == "Technologies not listed."
        assert kb["availability"] == "Availability information not available."
        assert kb["strengths"] == "Strengths not available."

    def test_numeric_contact_fields_render_as_text(self):
        kb = build_knowledge_base({"contact": {"phone": 5550100, "location": 42}})
        assert kb["contact"] == "Contact: 5550100. Location: 42"
        assert kb["location"] == "42"
        assert all(isinstance(kb[topic], str) for topic in TOPICS)

    def test_numeric_email_with_phone(self):
        kb = build_knowledge_base({"contact": {"email": 7, "phone": 8}})
        assert kb["contact"] == "Contact: 7 | 8. Location: N/A"
        assert kb["availability"] == "Reach out via 7 for opportunities."

    def test_missing_record_fields_render_empty(self):
        kb = build_knowledge_base({"experiences": [{"role": "Dev"}]})
        assert kb["experience"] == "Dev at  ()"


class TestKnowledgeBaseHolder:
    def test_builds_on_construction(self, sample_snapshot):
        holder = KnowledgeBaseHolder(sample_snapshot)
        assert holder.knowledge_base["location"] == "Porto"

    def test_same_snapshot_does_not_rebuild(self, sample_snapshot):
        holder = KnowledgeBaseHolder(sample_snapshot)
        kb = holder.knowledge_base
        assert holder.refresh(sample_snapshot) is False
        assert holder.knowledge_base is kb

    def test_new_snapshot_rebuilds(self, sample_snapshot):
        holder = KnowledgeBaseHolder(sample_snapshot)
        updated = dict(sample_snapshot, contact={"location": "Madrid"})
        assert holder.refresh(updated) is True
        assert holder.knowledge_base["location"] == "Madrid"
        assert holder.snapshot is updated

    def test_equal_but_distinct_snapshot_rebuilds(self, sample_snapshot):
        holder = KnowledgeBaseHolder(sample_snapshot)
        old = holder.knowledge_base
        assert holder.refresh(dict(sample_snapshot)) is True
        assert holder.knowledge_base is not old
        assert dict(holder.knowledge_base) == dict(old)
