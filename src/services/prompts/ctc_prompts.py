"""
CTC estimation prompt.

Single prompt (no system/user split) because the estimation model is called
once per analysis in JSON output mode. The rubric and salary bands are fixed;
only the profile block and the caller's experience/role vary.
"""

from typing import List, Optional, Tuple

from src.common.types import GitHubProfileData, RepositorySummary

NOT_PROVIDED = "Not provided"
NOT_SPECIFIED = "Not specified"

# Bracket label -> band shown to the model (Indian market, LPA = lakh per annum)
SALARY_BANDS: List[Tuple[str, str]] = [
    ("Fresh Graduate (0-1 yr)", "₹3-8 LPA (higher ONLY for exceptional projects)"),
    ("Junior (1-3 yr)", "₹6-15 LPA (depends heavily on current company)"),
    ("Mid-Level (3-5 yr)", "₹12-25 LPA (must show solid technical depth)"),
    ("Senior (5-8 yr)", "₹20-45 LPA (requires leadership + system design)"),
    ("Lead/Principal (8+ yr)", "₹35-80 LPA (only with proven impact)"),
]

CTC_OUTPUT_SCHEMA = """{
  "ctc": "string (format: ₹X,XX,XXX - ₹Y,YY,YYY)",
  "message": "string (2-4 sentences)",
  "confidence": "number (0-100)"
}"""

CTC_OUTPUT_EXAMPLE = """{
  "ctc": "₹12,00,000 - ₹18,00,000",
  "message": "Three documented React projects carry real weight, but a six-month gap in activity undercuts them. An average of 4.2 stars per repo shows the community noticed.",
  "confidence": 72
}"""

ROLE_PREAMBLE = """You are a BRUTALLY HONEST senior tech hiring manager and compensation analyst with 15+ years of reviewing developer profiles for Indian tech companies. Give REALISTIC, no-nonsense salary estimates grounded in actual market data, not optimism.

Analyze this GitHub profile with extreme scrutiny."""

EXCLUSION_RULES = """⚠️ IGNORE THESE REPOS WHEN CALCULATING CTC:
1. Forked repositories - not original work
2. Tutorial/course projects ("react-tutorial", "javascript-course", "udemy-clone")
3. Assignment/practice repos - college assignments, coding challenges, practice problems
4. Template/boilerplate repos - starter templates, clones of popular apps
5. Archived/dead repos - not updated in 1+ years with no stars or forks

ONLY evaluate:
✅ Original projects with a unique value proposition
✅ Production-ready applications (deployed, documented, maintained)
✅ Contributions to ESTABLISHED open source projects
✅ Projects with community validation (stars, forks, real users)
✅ Work that shows real problem-solving rather than following tutorials

Names like "todo-app", "calculator", "weather-app", "netflix-clone" are LEARNING projects, not professional work."""

EVALUATION_CRITERIA = """EVALUATION CRITERIA (be brutal and honest):

1. REPOSITORY QUALITY - after filtering tutorials and forks, is what remains real, maintained, production-grade work?
2. IMPACT & VISIBILITY - stars and forks show real impact; zero stars everywhere means new or not valuable yet.
3. TECHNICAL DEPTH - specialist or dabbler? Modern stack? Any system design?
4. COMMITMENT & CONSISTENCY - recent activity, gaps, account age against activity.
5. EXPERIENCE REALITY CHECK - does the profile back up the claimed experience? The account should be at least as old as the career.
6. MARKET REALITY (Indian tech market 2024-25) - startups pay less than FAANG/MNCs, AI/ML is hot, basic CRUD is oversaturated, Bangalore/Hyderabad/Pune pay more than tier-2 cities.
7. RED FLAGS - no original repos left after filtering, only tutorial clones, no commits in 6 months, inflated experience, no READMEs, following 1000+ with 10 followers.
8. GREEN FLAGS - consistent history, documented original projects, community engagement, market-aligned stack, system design thinking."""

MESSAGE_RULES = """YOUR MESSAGE MUST:
- Be 2-4 sentences
- Cite SPECIFIC numbers from the profile (e.g. "Only 2 stars across 20 repos")
- Name strengths AND weaknesses when both exist
- Be witty and memorable but never sugarcoat ("tutorial-level work", not "room for improvement")

BAD: "You have good potential and your projects show promise. Keep learning!"
GOOD: "Your 47 repos average 0.3 stars each - quantity over quality won't impress hiring managers. Focus on 2-3 production-grade projects instead of tutorial clones." """

CONFIDENCE_SCALE = """CONFIDENCE SCORING:
- 90-100: exceptionally detailed profile, strong evidence
- 70-89: good indicators, reasonable estimate
- 50-69: limited data, educated guess
- 30-49: very sparse profile, highly uncertain
- 0-29: almost no data"""


def _or_default(value: Optional[str], default: str) -> str:
    return value if value else default


def format_repository_line(repo: RepositorySummary) -> str:
    """One line per repository: name, language, stars, forks, description."""
    return (
        f"- {repo.name}: {_or_default(repo.language, 'Unknown')} | "
        f"⭐{repo.stargazers_count} | 🍴{repo.forks_count} | "
        f"{_or_default(repo.description, 'No description')}"
    )


def _salary_band_table() -> str:
    return "\n".join(f"- {label}: {band}" for label, band in SALARY_BANDS)


def build_ctc_prompt(
    profile: GitHubProfileData,
    years_of_experience: str,
    target_role: str,
    account_age_years: int = 0,
) -> str:
    """
    Build the estimation prompt for one profile.

    Args:
        profile: Fetched profile, repositories and aggregate stats
        years_of_experience: Caller-selected experience bracket (free text)
        target_role: Caller-selected target role (free text)
        account_age_years: Whole years since the GitHub account was created

    Returns:
        Prompt text
    """
    user = profile.user
    stats = profile.stats

    created_on = user.created_at[:10] if user.created_at else "Unknown"
    avg_stars = (
        f"{stats.total_stars / user.public_repos:.1f}" if user.public_repos > 0 else "0"
    )
    language_names = ", ".join(stats.languages.keys()) or NOT_SPECIFIED
    top_languages = ", ".join(lang for lang, _ in stats.top_languages(3)) or "None"
    repo_lines = "\n".join(format_repository_line(repo) for repo in profile.repos[:5])

    return f"""{ROLE_PREAMBLE}

GitHub Profile Data:
- Username: {user.login}
- Name: {_or_default(user.name, NOT_PROVIDED)}
- Bio: {_or_default(user.bio, NOT_PROVIDED)}
- Public Repositories: {user.public_repos}
- Followers: {user.followers}
- Following: {user.following}
- Account Created: {created_on} ({account_age_years} years old)
- Location: {_or_default(user.location, NOT_SPECIFIED)}
- Company: {_or_default(user.company, NOT_SPECIFIED)}
- Total Stars Received: {stats.total_stars}
- Total Forks: {stats.total_forks}
- Languages Used: {language_names}
- Language Count: {len(stats.languages)}
- Recent Activity (repos updated in last 6 months): {stats.recent_activity}/{user.public_repos}
- Average Stars per Repo: {avg_stars}
- Top Languages: {top_languages}

Repository Distribution Analysis:
{repo_lines or '- No public repositories'}

Target Role: {target_role}
Years of Experience: {years_of_experience}

{EXCLUSION_RULES}

{EVALUATION_CRITERIA}

SALARY ESTIMATION RULES:
{_salary_band_table()}

Be harsh where needed. If the profile is weak, say it directly. If it is impressive, acknowledge it and stay grounded.

{MESSAGE_RULES}

CRITICAL: Respond with ONLY a valid JSON object matching this exact schema. No markdown, no code blocks, no explanatory text.

Required JSON Schema:
{CTC_OUTPUT_SCHEMA}

Example valid response:
{CTC_OUTPUT_EXAMPLE}

{CONFIDENCE_SCALE}

Give an estimate you would defend to a hiring committee.
"""
