"""Prompt text for resume analysis. Pure string rendering, no I/O."""

ANALYSIS_SYSTEM_PROMPT = "You are an expert resume reviewer. Always respond with valid JSON only."

ANALYSIS_PROMPT = """You are an expert resume reviewer and career coach.

Analyze the resume carefully and return feedback in STRICT JSON format.

IMPORTANT RULES (CRITICAL):
1. Return ONLY valid JSON.
2. Do NOT include markdown.
3. Do NOT include backticks or code fences.
4. Do NOT include explanations outside JSON.
5. For every "status" field inside "sections", you MUST use ONLY one of these exact values:
   - "good"
   - "missing"
   - "needs-work"
6. Do NOT use variations like:
   - "needs improvement"
   - "needs-improvement"
   - "average"
   - "poor"
   - "weak"
   - or any other wording

If you use any value outside "good", "missing", "needs-work" the response will be rejected.

Resume Content:
{resume_text}
{job_description_block}
Return a JSON object with EXACTLY this structure:

{{
  "score": number (integer 0-100),
  "summary": "Brief overall summary of the resume",
  "strengths": ["Strength 1", "Strength 2", "Strength 3", "Strength 4"],
  "improvements": ["Improvement 1", "Improvement 2", "Improvement 3", "Improvement 4", "Improvement 5"],
  "keywordMatch": {{
    "technical": number (integer 0-100),
    "soft": number (integer 0-100),
    "industry": number (integer 0-100)
  }},
  "sections": {{
    "contact": {{ "status": "good", "message": "Short explanation" }},
    "summary": {{ "status": "missing", "message": "Short explanation" }},
    "experience": {{ "status": "needs-work", "message": "Short explanation" }},
    "education": {{ "status": "good", "message": "Short explanation" }},
    "skills": {{ "status": "good", "message": "Short explanation" }},
    "projects": {{ "status": "needs-work", "message": "Short explanation" }}
  }},
  "suggestions": [
    {{
      "title": "Improvement title",
      "description": "Clear explanation of what to improve",
      "example": "Concrete example the user can follow"
    }}
  ]
}}
"""


def build_analysis_prompt(resume_text: str, job_description: str | None = None) -> str:
    """Render the analysis prompt. Same inputs always give the same string."""
    job_description = (job_description or "").strip()
    job_description_block = f"\nTarget Job Description:\n{job_description}\n" if job_description else ""
    return ANALYSIS_PROMPT.format(
        resume_text=resume_text,
        job_description_block=job_description_block,
    )
