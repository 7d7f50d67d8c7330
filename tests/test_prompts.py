"""
Tests for grounded prompt assembly.
"""

from navi.core.context_tags import Query
from navi.core.prompts import assemble, build_context_block, fallback_sentence
from navi.vector.types import KnowledgeEntry, ScoredEntry


def hit(content, score, category="General"):
    return ScoredEntry(entry=KnowledgeEntry.create(content, [1.0], category), score=score)


ENGINEERING_QUERY = Query(
    raw_message="[Context: College of Engineering] Where is the dean's office?",
    category="College of Engineering",
    clean_message="Where is the dean's office?",
)


def test_context_block_joins_contents_in_order():
    block = build_context_block([hit("first", 0.9), hit("second", 0.5)])

    assert block == "first\n\nsecond"


def test_context_block_is_empty_for_empty_result():
    assert build_context_block([]) == ""


def test_prompt_contains_persona_instructions_context_and_question():
    prompt = assemble(ENGINEERING_QUERY, [hit("Dean's office: 2nd floor, Engineering Building", 0.8)])

    assert 'assisting a member of "College of Engineering"' in prompt
    assert "assume they mean within College of Engineering unless the question states otherwise" in prompt
    assert "Strictly answer based ONLY on the provided Context." in prompt
    assert "Context:\nDean's office: 2nd floor, Engineering Building\n\nQuestion: Where is the dean's office?" in prompt
    assert prompt.endswith("Question: Where is the dean's office?")


def test_empty_result_keeps_fallback_instruction():
    prompt = assemble(ENGINEERING_QUERY, [])

    assert "Context:\n\n\nQuestion:" in prompt
    assert fallback_sentence("College of Engineering") in prompt
    assert "I don't have information on that specific topic for College of Engineering." in prompt


def test_assistant_name_is_configurable():
    prompt = assemble(ENGINEERING_QUERY, [], assistant_name="Guide")

    assert prompt.startswith("You are Guide, the AI Campus Navigator.")


def test_assemble_is_deterministic():
    result = [hit("a", 0.9), hit("b", 0.8)]

    assert assemble(ENGINEERING_QUERY, result) == assemble(ENGINEERING_QUERY, list(result))


def test_scored_entry_exposes_entry_content():
    scored = hit("Dean's office: Room 210", 0.7, "College of Engineering")

    assert scored.content == scored.entry.content == "Dean's office: Room 210"
