"""
Prompt construction.

Chat messages are classified as job related or general with a keyword
match.  Job related messages get a template carrying a truncated view of
the user's profile and the jobs currently on offer; general messages
only carry the recent conversation.  The remaining builders produce the
compact extraction prompts used for résumé parsing, job matching and
market analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

JOB_KEYWORDS: List[str] = [
    "job", "career", "resume", "interview", "apply", "application",
    "hire", "hiring", "recruiter", "company", "work", "position",
    "role", "faang", "google", "microsoft", "amazon", "meta", "apple",
    "software engineer", "developer", "data scientist", "analyst",
    "salary", "offer", "internship", "placement", "job market",
    "skill", "experience", "qualification", "cv", "cover letter",
    "recommend jobs", "suggest jobs", "best jobs", "suitable jobs",
]


def is_job_related(message: str) -> bool:
    """Return True if ``message`` mentions any job keyword (case-insensitive)."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in JOB_KEYWORDS)


@dataclass
class ChatContext:
    """Optional context that accompanies a chat message.

    ``resume_data`` follows the résumé JSON produced by the parser,
    ``available_jobs`` holds job dicts with at least ``title`` and
    ``company`` and ``chat_history`` holds ``{"role", "content"}`` turns.
    """

    resume_data: Optional[Mapping[str, object]] = None
    available_jobs: Sequence[Mapping[str, object]] = field(default_factory=list)
    chat_history: Sequence[Mapping[str, object]] = field(default_factory=list)


def _skills(resume: Optional[Mapping[str, object]], limit: int = 5) -> str:
    skills = (resume or {}).get("skills") or []
    return ", ".join(str(s) for s in list(skills)[:limit])


def _experience_years(resume: Optional[Mapping[str, object]]) -> object:
    return (resume or {}).get("totalExperience") or 0


def _degrees(resume: Optional[Mapping[str, object]], limit: int = 2) -> str:
    education = (resume or {}).get("education") or []
    return ", ".join(str(e.get("degree", "")) for e in list(education)[:limit] if isinstance(e, Mapping))


def _jobs_snippet(jobs: Sequence[Mapping[str, object]], limit: int = 5) -> str:
    return ", ".join(f"{j.get('title')} @ {j.get('company')}" for j in list(jobs)[:limit])


def _history(turns: Sequence[Mapping[str, object]], count: int, width: int, sep: str) -> str:
    recent = list(turns)[-count:] if count else []
    return sep.join(f"{t.get('role')}: {str(t.get('content', ''))[:width]}" for t in recent)


def build_chat_prompt(message: str, context: Optional[ChatContext] = None) -> str:
    context = context or ChatContext()
    if is_job_related(message):
        resume = context.resume_data
        return f"""You are JobHub AI - an expert career advisor and job search assistant.

User Profile:
- Skills: {_skills(resume) or 'Not specified'}
- Experience: {_experience_years(resume)} years
- Education: {_degrees(resume) or 'Not specified'}

Available Jobs: {_jobs_snippet(context.available_jobs) or 'No jobs loaded'}

Recent Conversation: {_history(context.chat_history, 3, 60, ' | ') or 'None'}

User Question: {message}

Instructions:
- If user asks about jobs/career, use their profile and available jobs to give personalized advice
- If recommending specific jobs, mention job titles and companies from available jobs
- If profile is incomplete, suggest updating it for better recommendations
- Be helpful, direct, and actionable
- Keep response under 150 words

Answer:"""

    return f"""You are a highly intelligent AI assistant - knowledgeable, helpful, and versatile across all topics.

You can help with:
- General knowledge, science, math, history, technology
- Life advice, productivity, learning strategies
- Coding, debugging, technical problems
- Creative writing, brainstorming, explanations
- Problem-solving, decision-making, planning
- And anything else the user needs

Recent Conversation:
{_history(context.chat_history, 3, 80, chr(10)) or 'None'}

User Question: {message}

Instructions:
- Give direct, accurate, and helpful answers
- Be conversational but professional
- If it's a complex question, break it down clearly
- Use examples when helpful
- Be encouraging and supportive
- Keep response clear and concise (under 200 words unless more detail needed)

Answer:"""


def build_stream_prompt(message: str, context: Optional[ChatContext] = None) -> str:
    """Shorter chat prompts used for streamed answers."""
    context = context or ChatContext()
    if is_job_related(message):
        resume = context.resume_data
        return f"""You are JobHub AI - career advisor.

User: {_skills(resume) or 'Skills not specified'} | {_experience_years(resume)}y exp
Jobs: {_jobs_snippet(context.available_jobs) or 'None'}

Q: {message}
A:"""

    return f"""You are an intelligent AI assistant, helpful across all topics.

History: {_history(context.chat_history, 2, 60, ' | ') or 'None'}

Q: {message}
A:"""


RESUME_TEXT_LIMIT = 2000


def build_resume_prompt(resume_text: str) -> str:
    truncated = resume_text[:RESUME_TEXT_LIMIT]
    return f"""Extract JSON from resume (no markdown, no explanation):

{truncated}

JSON format:
{{"name":"","email":"","phone":"","skills":[],"experience":[{{"title":"","company":"","duration":""}}],"education":[{{"degree":"","institution":"","year":""}}],"summary":"","totalExperience":0}}

Output only JSON:"""


def build_recommendation_prompt(
    resume_data: Mapping[str, object],
    jobs: Sequence[Mapping[str, object]],
    limit: int = 15,
) -> str:
    rows: List[str] = []
    for i, job in enumerate(list(jobs)[:limit]):
        job_skills = ",".join(str(s) for s in list(job.get("skills") or [])[:3])
        job_id = job.get("id") or job.get("job_id") or job.get("_id")
        rows.append(f"{i + 1}|{job.get('title')}|{job.get('company')}|{job.get('location')}|{job_skills}|{job_id}")
    return f"""Match candidate to jobs. Output JSON array only.

Candidate: {_skills(resume_data)} | {_experience_years(resume_data)}y | {_degrees(resume_data) or 'N/A'}

Jobs (ID|Title|Company|Location|Skills|JobID):
{chr(10).join(rows)}

JSON format:
[{{"jobId":"exact_id","matchScore":0.85,"reasons":["reason1","reason2"]}}]

Rules: score 0-1, limit 5, min score 0.6"""


def _salary_min(job: Mapping[str, object]) -> object:
    salary = job.get("salary")
    if isinstance(salary, Mapping):
        return salary.get("min") or 0
    return 0


def build_market_prompt(jobs: Sequence[Mapping[str, object]], limit: int = 30) -> str:
    chunk = "\n".join(
        f"{j.get('title')}|{j.get('company')}|{j.get('location')}|{_salary_min(j)}"
        for j in list(jobs)[:limit]
    )
    return f"""Analyze jobs, return JSON only:

Jobs (Title|Company|Location|Salary):
{chunk}

JSON format:
{{"topSkills":["skill1","skill2","skill3"],"salaryTrends":"brief trend","popularLocations":["loc1","loc2"],"insights":["insight1","insight2"]}}

Output only JSON:"""
