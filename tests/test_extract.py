from __future__ import annotations

from jobhub.ai.extract import (
    JobRecommendation,
    MarketAnalysis,
    ResumeProfile,
    extract_json_array,
    extract_json_object,
    parse_model,
    parse_model_list,
)


def test_object_inside_prose_and_fences() -> None:
    text = 'Sure! Here it is:\n```json\n{"name": "Jane", "skills": ["Python"]}\n```\nAnything else?'
    result = extract_json_object(text)
    assert result.ok
    assert result.value == {"name": "Jane", "skills": ["Python"]}


def test_first_well_formed_object_wins() -> None:
    result = extract_json_object('{broken} then {"a": 1} and {"b": 2}')
    assert result.value == {"a": 1}


def test_missing_or_malformed_json_is_an_error_not_an_exception() -> None:
    for text in ["", "no json here", '{"a": ', "[1, 2"]:
        result = extract_json_object(text)
        assert not result.ok
        assert result.value is None
        assert result.error is not None and result.error.reason


def test_array_extraction() -> None:
    result = extract_json_array('Matches: [{"jobId": "1", "matchScore": 0.9}] done')
    assert result.value == [{"jobId": "1", "matchScore": 0.9}]
    assert not extract_json_array('{"not": "an array"}').ok


def test_unwrap_or_returns_default_on_error() -> None:
    assert extract_json_array("nothing").unwrap_or([]) == []


def test_resume_profile_validation() -> None:
    text = (
        '{"name": "Jane Doe", "email": "jane@example.com", "phone": 5551234, '
        '"skills": ["Python", "SQL"], "experience": [{"title": "Engineer", "company": "Acme", "duration": null}], '
        '"education": [{"degree": "BS", "institution": "State", "year": 2018}], '
        '"summary": null, "totalExperience": 3}'
    )
    result = parse_model(text, ResumeProfile)
    assert result.ok
    profile = result.value
    assert profile.name == "Jane Doe"
    assert profile.phone == "5551234"
    assert profile.education[0].year == "2018"
    assert profile.experience[0].duration == ""
    assert profile.summary == ""
    assert profile.total_experience == 3
    assert profile.model_dump(by_alias=True)["totalExperience"] == 3


def test_schema_violation_is_an_error() -> None:
    result = parse_model('{"name": "Jane", "totalExperience": -2}', ResumeProfile)
    assert not result.ok
    assert "schema validation failed" in result.error.reason


def test_recommendation_list_drops_invalid_entries() -> None:
    text = (
        '[{"jobId": "a1", "matchScore": 0.91, "reasons": ["Python"]},'
        ' {"jobId": "", "matchScore": 0.8},'
        ' {"jobId": "b2", "matchScore": "high"},'
        ' {"matchScore": 0.7},'
        ' {"jobId": 42, "matchScore": 1}]'
    )
    result = parse_model_list(text, JobRecommendation)
    assert result.ok
    assert [(r.job_id, r.match_score) for r in result.value] == [("a1", 0.91), ("42", 1.0)]


def test_market_analysis_aliases() -> None:
    result = parse_model(
        '{"topSkills": ["Python"], "salaryTrends": "up", "popularLocations": ["Remote"], "insights": []}',
        MarketAnalysis,
    )
    assert result.value.top_skills == ["Python"]
    assert result.value.salary_trends == "up"
