from __future__ import annotations

import pytest

from jobhub.ai.prompts import (
    ChatContext,
    build_chat_prompt,
    build_market_prompt,
    build_recommendation_prompt,
    build_resume_prompt,
    build_stream_prompt,
    is_job_related,
)


@pytest.mark.parametrize(
    "message",
    [
        "What's a good resume format?",
        "How do I prepare for an INTERVIEW?",
        "Is Google hiring?",
        "Write me a cover letter",
    ],
)
def test_job_related_messages(message: str) -> None:
    assert is_job_related(message)


@pytest.mark.parametrize("message", ["What's the capital of France?", "Explain photosynthesis"])
def test_general_messages(message: str) -> None:
    assert not is_job_related(message)


def _context() -> ChatContext:
    return ChatContext(
        resume_data={
            "skills": ["Python", "SQL", "Docker", "AWS", "React", "Go"],
            "totalExperience": 4,
            "education": [{"degree": "BSc"}, {"degree": "MSc"}, {"degree": "PhD"}],
        },
        available_jobs=[{"title": f"Engineer {i}", "company": f"Co{i}"} for i in range(8)],
        chat_history=[{"role": "user", "content": f"turn {i} " + "x" * 100} for i in range(5)],
    )


def test_job_prompt_carries_truncated_profile_and_jobs() -> None:
    prompt = build_chat_prompt("Which job suits me?", _context())
    assert "JobHub AI" in prompt
    assert "Skills: Python, SQL, Docker, AWS, React\n" in prompt
    assert "Go" not in prompt.split("Skills:")[1].split("\n")[0]
    assert "Experience: 4 years" in prompt
    assert "Education: BSc, MSc\n" in prompt
    assert "Engineer 4 @ Co4" in prompt
    assert "Engineer 5 @ Co5" not in prompt
    # Only the last three turns, each cut to 60 characters.
    assert "turn 1" not in prompt
    assert "turn 2" in prompt and "turn 4" in prompt
    assert prompt.count(" | user: ") == 2


def test_general_prompt_omits_job_context() -> None:
    prompt = build_chat_prompt("Explain photosynthesis", _context())
    assert "JobHub AI" not in prompt
    assert "Available Jobs" not in prompt
    assert "Python" not in prompt
    assert "turn 2" in prompt and "turn 1" not in prompt
    assert "User Question: Explain photosynthesis" in prompt


def test_prompts_without_context_use_placeholders() -> None:
    prompt = build_chat_prompt("career advice please")
    assert "Skills: Not specified" in prompt
    assert "Available Jobs: No jobs loaded" in prompt
    assert "Recent Conversation: None" in prompt


def test_stream_prompts_are_compact() -> None:
    job_prompt = build_stream_prompt("any job for me?", _context())
    assert job_prompt.startswith("You are JobHub AI - career advisor.")
    assert "4y exp" in job_prompt
    general = build_stream_prompt("Explain photosynthesis", _context())
    assert "turn 3" in general and "turn 2" not in general


def test_resume_prompt_truncates_text() -> None:
    prompt = build_resume_prompt("a" * 2500)
    assert "a" * 2000 in prompt
    assert "a" * 2001 not in prompt


def test_recommendation_prompt_lists_fifteen_jobs() -> None:
    jobs = [
        {"id": f"job-{i}", "title": "Dev", "company": "Acme", "location": "Remote", "skills": ["a", "b", "c", "d"]}
        for i in range(20)
    ]
    prompt = build_recommendation_prompt({"skills": ["Python"]}, jobs)
    assert "15|Dev|Acme|Remote|a,b,c|job-14" in prompt
    assert "job-15" not in prompt
    assert "Candidate: Python | 0y | N/A" in prompt


def test_market_prompt_uses_salary_minimum() -> None:
    prompt = build_market_prompt([{"title": "Dev", "company": "Acme", "location": "NYC", "salary": {"min": 90000}}])
    assert "Dev|Acme|NYC|90000" in prompt
